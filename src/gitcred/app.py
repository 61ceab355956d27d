"""Typer application and CLI entry point for gitcred.

This module wires together the top-level Typer application and registers
the built-in commands (``get``, ``helpers``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~gitcred.exceptions.GitcredError` exits with its own code; any other
unhandled exception is written to a crash log under the data directory.

See Also:
    :mod:`gitcred.config`: Settings resolution.
    :mod:`gitcred.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from gitcred import __version__
from gitcred.commands.config import config_app
from gitcred.commands.get import get_command
from gitcred.commands.helpers import helpers_command
from gitcred.exceptions import GitcredError
from gitcred.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="gitcred",
    help="Discover credentials through git credential helpers.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("get")(get_command)
app.command("helpers")(helpers_command)
app.add_typer(config_app, name="config", help="Manage gitcred settings.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"gitcred {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
    shell: Optional[str] = typer.Option(
        None, "--shell", help="Shell used to launch helpers (default: sh)."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds to wait for each helper."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~gitcred.output.OutputManager` and
    logging from CLI flags, resolves :class:`~gitcred.models.Settings`, and
    stores shared state in ``ctx.obj``.

    Raises:
        typer.Exit: With the error's exit code if the settings are invalid.
    """
    from gitcred.config import resolve_settings
    from gitcred.output import (
        OutputFormat,
        OutputManager,
        configure_logging,
        error,
        set_output,
    )

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    configure_logging(output)

    try:
        settings = resolve_settings(cli_shell=shell, cli_timeout=timeout)
    except GitcredError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from gitcred.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``gitcred`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from gitcred.output import error

        if isinstance(exc, GitcredError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
