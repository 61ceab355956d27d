"""End-to-end tests for the gitcred CLI.

Each test writes a small git config file and points the commands at it with
``--file`` so that the user's own git configuration never takes part.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from gitcred import __version__
from gitcred.app import app
from gitcred.config import load_settings, save_settings
from gitcred.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE, EXIT_NOT_FOUND
from gitcred.models import Settings

pytestmark = pytest.mark.skipif(
    shutil.which("git") is None or shutil.which("sh") is None,
    reason="git and a POSIX shell are required",
)

URL = "https://example.com/org/repo.git"
BOTH = "!f() { echo username=a; echo password=b; }; f"


def _git_config(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    return path


@pytest.fixture
def config_file(isolated_config: Path) -> Path:
    return _git_config(
        isolated_config / "gitconfig",
        f'[credential]\n\thelper = "{BOTH}"\n',
    )


@pytest.fixture
def empty_config_file(isolated_config: Path) -> Path:
    return _git_config(isolated_config / "empty-gitconfig", "")


# ---------------------------------------------------------------------------
# Root options
# ---------------------------------------------------------------------------


class TestRoot:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"gitcred {__version__}" in result.output

    def test_invalid_env_timeout(
        self,
        cli_runner: CliRunner,
        isolated_config: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("GITCRED_TIMEOUT", "soon")
        result = cli_runner.invoke(app, ["config", "show"])
        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert "GITCRED_TIMEOUT" in result.output


# ---------------------------------------------------------------------------
# get
# ---------------------------------------------------------------------------


class TestGet:
    def test_prints_credential_lines(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["get", URL, "--file", str(config_file)])
        assert result.exit_code == 0, result.output
        assert result.stdout == "username=a\npassword=b\n"

    def test_json(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "get", URL, "-F", str(config_file)])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"username": "a", "password": "b"}

    def test_username_hint(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["get", URL, "-u", "bob", "-F", str(config_file)])
        assert result.exit_code == 0, result.output
        assert result.stdout == "username=bob\npassword=b\n"

    def test_url_helper_beats_global(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        config_file = _git_config(
            isolated_config / "gitconfig",
            '[credential "https://example.com"]\n'
            '\thelper = "!f() { echo username=c; }; f"\n'
            "[credential]\n"
            f'\thelper = "{BOTH}"\n',
        )
        result = cli_runner.invoke(app, ["get", URL, "-F", str(config_file)])
        assert result.exit_code == 0, result.output
        assert result.stdout == "username=c\npassword=b\n"

    def test_not_found(self, cli_runner: CliRunner, empty_config_file: Path) -> None:
        result = cli_runner.invoke(app, ["get", URL, "-F", str(empty_config_file)])
        assert result.exit_code == EXIT_NOT_FOUND
        assert "username=" not in result.stdout
        assert "No credential found." in result.output

    def test_failing_shell_is_not_found(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(
            app, ["--shell", "/nonexistent/sh", "get", URL, "-F", str(config_file)]
        )
        assert result.exit_code == EXIT_NOT_FOUND

    def test_timeout_option(
        self, cli_runner: CliRunner, isolated_config: Path
    ) -> None:
        config_file = _git_config(
            isolated_config / "gitconfig",
            '[credential]\n\thelper = "!f() { sleep 10; echo username=a; echo password=b; }; f"\n',
        )
        result = cli_runner.invoke(
            app, ["--timeout", "0.5", "get", URL, "-F", str(config_file)]
        )
        assert result.exit_code == EXIT_NOT_FOUND


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_lists_candidate_keys(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        config_file = _git_config(
            isolated_config / "gitconfig",
            '[credential "https://example.com"]\n'
            "\thelper = store\n"
            "\tusername = alice\n",
        )
        result = cli_runner.invoke(
            app, ["--json", "-q", "helpers", URL, "-F", str(config_file)]
        )
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert [row["key"] for row in rows] == [
            f"credential.{URL}.username",
            "credential.https://example.com.username",
            "credential.username",
            f"credential.{URL}.helper",
            "credential.https://example.com.helper",
            "credential.helper",
        ]
        assert rows[1]["value"] == "alice"
        assert rows[4] == {
            "key": "credential.https://example.com.helper",
            "value": "store",
            "command": "git credential-store get",
        }
        assert rows[5]["command"] == ""

    def test_does_not_run_helpers(
        self, cli_runner: CliRunner, isolated_config: Path
    ) -> None:
        marker = isolated_config / "ran"
        config_file = _git_config(
            isolated_config / "gitconfig",
            f'[credential]\n\thelper = "!touch {marker}"\n',
        )
        result = cli_runner.invoke(app, ["--plain", "helpers", URL, "-F", str(config_file)])
        assert result.exit_code == 0, result.output
        assert f"touch {marker} get" in result.stdout
        assert not marker.exists()


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_show_defaults(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "-q", "config", "show"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["shell"] == "sh"
        assert data["timeout"] is None

    def test_set_timeout(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "timeout", "30"])
        assert result.exit_code == 0, result.output
        assert load_settings().timeout == 30.0

    def test_clear_timeout(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        save_settings(Settings(timeout=5))
        result = cli_runner.invoke(app, ["config", "set", "timeout", "none"])
        assert result.exit_code == 0, result.output
        assert load_settings().timeout is None

    def test_set_unknown_key(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "colour", "red"])
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Unknown setting" in result.output

    def test_set_invalid_value(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "timeout", "0"])
        assert result.exit_code == EXIT_INVALID_USAGE
        assert load_settings().timeout is None

    def test_reset_with_force(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        save_settings(Settings(shell="/bin/bash"))
        result = cli_runner.invoke(app, ["--force", "config", "reset"])
        assert result.exit_code == 0, result.output
        assert load_settings().shell == "sh"

    def test_reset_declined(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        save_settings(Settings(shell="/bin/bash"))
        result = cli_runner.invoke(app, ["config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert load_settings().shell == "/bin/bash"

    def test_settings_apply_to_get(
        self, cli_runner: CliRunner, config_file: Path
    ) -> None:
        save_settings(Settings(shell="/nonexistent/sh"))
        result = cli_runner.invoke(app, ["get", URL, "-F", str(config_file)])
        assert result.exit_code == EXIT_NOT_FOUND
