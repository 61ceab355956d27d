"""Shared test fixtures for gitcred.

Provides reusable fixtures for isolating settings, managing output state,
writing executable helper scripts, and running CLI commands. These
fixtures are discovered by pytest automatically.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Callable

import pytest

from gitcred.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Settings isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate gitcred settings to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME under tmp_path, clears all
    GITCRED_* environment variables and changes into tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("gitcred.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["GITCRED_SHELL", "GITCRED_TIMEOUT", "GITCRED_GIT"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Helper scripts
# ---------------------------------------------------------------------------


@pytest.fixture
def make_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing an executable ``/bin/sh`` script into tmp_path.

    Usage::

        path = make_script("helper", "echo username=c")
    """

    def _make(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        mode = os.stat(path).st_mode
        os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture
def recording_shell(make_script: Callable[[str, str], Path], tmp_path: Path) -> tuple[Path, Path]:
    """A fake shell that records the command string it was asked to run.

    Invoked as ``<shell> -c "<command> get"``, it appends ``$2`` to a log
    file and exits 1 so that discovery moves on to the next helper.

    Returns:
        ``(shell_path, log_path)``.
    """
    log = tmp_path / "commands.log"
    shell = make_script("fake-sh", f'printf \'%s\\n\' "$2" >> "{log}"\nexit 1')
    return shell, log


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
