"""Helpers command -- show how a URL resolves to helper commands.

A dry run of discovery: lists every ``credential.*`` key consulted for the
URL, in precedence order, with its configured value and the command line
that would be launched. No helper is executed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gitcred.commands.get import build_helper, make_config
from gitcred.models import Settings
from gitcred.normalize import normalize_command
from gitcred.output import info, print_table


def helpers_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Remote URL to resolve."),
    config_file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-F",
        help="Read credential.* settings from this git config file only.",
    ),
) -> None:
    """List the configuration keys and helper commands URL resolves to.

    Example::

        gitcred helpers https://example.com/repo.git
        gitcred --json helpers git://example.com/repo
    """
    settings: Settings = ctx.obj["settings"]
    config = make_config(settings, config_file)
    helper = build_helper(url, settings, config)

    info(f"protocol: {helper.protocol or '-'}  host: {helper.host or '-'}")
    rows: list[list[str]] = []
    for name in ("username", "helper"):
        for key in helper.candidate_keys(name):
            value = config.get_string(key)
            if name == "helper":
                command = normalize_command(value, windows_paths=settings.windows_paths)
                shown = f"{command} get" if command is not None else ""
            else:
                shown = ""
            rows.append([key, value if value is not None else "", shown])

    print_table(["key", "value", "command"], rows, title="Credential configuration")
    info(f"Resolved username: {helper.username or '-'}")
