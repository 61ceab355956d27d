"""Config commands -- view and modify gitcred settings.

Provides the ``gitcred config`` sub-command group for reading, updating,
and resetting the settings file (:class:`~gitcred.models.Settings`). These
settings control how helpers are launched; the helpers themselves are
configured in git (``git config credential.helper ...``).
"""

from __future__ import annotations

import typer

from gitcred.exit_codes import EXIT_INVALID_USAGE
from gitcred.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the settings stored on disk.

    Example::

        gitcred config show
        gitcred --json config show
    """
    from gitcred.config import load_settings, settings_path

    settings = load_settings()
    info(f"Settings file: {settings_path()}")
    format_response(settings.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting name, e.g. 'shell' or 'timeout'."),
    value: str = typer.Argument(help="Value to set ('none' clears an optional setting)."),
) -> None:
    """Set a single setting.

    The value is validated against :class:`~gitcred.models.Settings`
    before saving, so ``timeout`` must be a positive number and
    ``windows_paths`` a boolean.

    Raises:
        typer.Exit: With code 2 for an unknown key or an invalid value.

    Example::

        gitcred config set shell /bin/bash
        gitcred config set timeout 30
        gitcred config set timeout none
    """
    from gitcred.config import load_settings, save_settings
    from gitcred.models import Settings

    data = load_settings().model_dump(mode="json")
    if key not in data:
        error(f"Unknown setting: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    data[key] = None if value.lower() in ("none", "null", "") else value
    try:
        settings = Settings.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_settings(settings)
    success(f"Set {key} = {getattr(settings, key)}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset settings to defaults.

    Asks for confirmation unless ``--force`` is active.

    Raises:
        typer.Exit: If the user declines confirmation.
    """
    from gitcred.config import save_settings
    from gitcred.models import Settings

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all settings to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_settings(Settings())
    success("Settings reset to defaults.")
