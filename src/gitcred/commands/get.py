"""Get command -- discover a credential for a remote URL.

Runs the configured credential helpers for a URL exactly as git would and
prints the result in the ``gitcredentials(7)`` line format::

    $ gitcred get https://example.com/org/repo.git
    username=alice
    password=s3cret

When no helper supplies both fields the command prints nothing on stdout
and exits with :data:`~gitcred.exit_codes.EXIT_NOT_FOUND`. The message on
stderr does not say which helpers ran or why they failed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gitcred.exit_codes import EXIT_NOT_FOUND
from gitcred.gitconfig import GitConfig
from gitcred.helper import CredentialHelper
from gitcred.models import Settings
from gitcred.output import debug, error, print_fields, suggest


def make_config(settings: Settings, config_file: Optional[Path] = None) -> GitConfig:
    """Return the git configuration lookup for the CLI.

    Args:
        settings: Effective gitcred settings; supplies the git executable.
        config_file: Read ``credential.*`` keys only from this file instead
            of git's normal configuration levels.
    """
    return GitConfig(git=settings.git_executable, file=config_file)


def build_helper(
    url: str,
    settings: Settings,
    config: GitConfig,
    username: Optional[str] = None,
) -> CredentialHelper:
    """Create a :class:`CredentialHelper` for *url* and read its configuration.

    Args:
        url: The remote URL.
        settings: Effective gitcred settings (shell, timeout, path rules).
        config: Configuration lookup, see :func:`make_config`.
        username: Username to seed discovery with.
    """
    helper = CredentialHelper(
        url,
        shell=settings.shell,
        timeout=settings.timeout,
        windows_paths=settings.windows_paths,
    )
    return helper.with_username(username).config(config)


def get_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Remote URL to find credentials for."),
    username: Optional[str] = typer.Option(
        None, "--username", "-u", help="Username to query helpers with."
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-F",
        help="Read credential.* settings from this git config file only.",
    ),
) -> None:
    """Discover a username and password for URL from credential helpers.

    Args:
        ctx: Typer context carrying the resolved settings.
        url: Remote URL to look up.
        username: Optional username hint passed to every helper.
        config_file: Optional git config file to read instead of git's
            normal configuration levels.

    Raises:
        typer.Exit: With code 4 when no credential was found.

    Example::

        gitcred get https://example.com/repo.git
        gitcred get -u alice https://example.com/repo.git --json
    """
    settings: Settings = ctx.obj["settings"]
    helper = build_helper(url, settings, make_config(settings, config_file), username)
    debug(f"{len(helper.commands)} helper command(s) configured")

    found = helper.execute()
    if found is None:
        error("No credential found.")
        suggest("Configure one with: git config --global credential.helper <helper>")
        raise typer.Exit(code=EXIT_NOT_FOUND)

    print_fields({"username": found.username, "password": found.password})
