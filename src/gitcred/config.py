"""Settings management with XDG paths, atomic writes, and precedence resolution.

This module handles the persistent settings of gitcred itself. These are
separate from the git configuration that names credential helpers, which
is read through :mod:`gitcred.gitconfig`.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.gitcred/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Settings file** -- A single :class:`~gitcred.models.Settings` JSON
  file (``config.json``) holding the helper shell, timeout and path rules.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, and the settings file into the effective settings.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from gitcred.exceptions import ConfigError
from gitcred.models import Settings

_APP_NAME = "gitcred"
_CONFIG_FILENAME = "config.json"

ENV_SHELL = "GITCRED_SHELL"
ENV_TIMEOUT = "GITCRED_TIMEOUT"
ENV_GIT = "GITCRED_GIT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/gitcred/`` (default ``~/.config/gitcred/``).
    On macOS/Windows: ``~/.gitcred/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/gitcred/`` (default ``~/.local/share/gitcred/``).
    On macOS/Windows: ``~/.gitcred/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Settings file ---


def settings_path() -> Path:
    """Path to the settings file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_settings() -> Settings:
    """Load settings from the XDG config directory.

    Returns:
        The deserialised :class:`~gitcred.models.Settings`. If the file does
        not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = settings_path()
    if not path.is_file():
        return Settings()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return Settings.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid settings at {path}: {exc}") from exc


def save_settings(settings: Settings) -> None:
    """Persist *settings* atomically to disk."""
    data = settings.model_dump(mode="json")
    _atomic_write(settings_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    shell = os.environ.get(ENV_SHELL)
    if shell:
        overrides["shell"] = shell
    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        try:
            overrides["timeout"] = float(timeout)
        except ValueError as exc:
            raise ConfigError(f"{ENV_TIMEOUT} must be a number of seconds, got {timeout!r}") from exc
    git = os.environ.get(ENV_GIT)
    if git:
        overrides["git_executable"] = git
    return overrides


def resolve_settings(
    cli_shell: Optional[str] = None,
    cli_timeout: Optional[float] = None,
) -> Settings:
    """Resolve settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_shell``, ``cli_timeout``)
        2. Environment variables (``GITCRED_SHELL``, ``GITCRED_TIMEOUT``,
           ``GITCRED_GIT``)
        3. User settings file (``~/.config/gitcred/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the settings file or an override is invalid.
    """
    data = load_settings().model_dump()
    data.update(_env_overrides())
    if cli_shell is not None:
        data["shell"] = cli_shell
    if cli_timeout is not None:
        data["timeout"] = cli_timeout
    try:
        return Settings.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid settings override: {exc}") from exc
