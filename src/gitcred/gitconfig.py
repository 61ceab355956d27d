"""Configuration lookup services for ``credential.*`` keys.

Discovery only needs one operation from a configuration store:
``get_string(key) -> Optional[str]``, returning ``None`` for a missing key
or a failed lookup. Any object with that method satisfies
:class:`ConfigLookup`. Precedence between configuration files is the
store's business.

Two implementations ship with gitcred:

- :class:`MemoryConfig` -- an in-memory store with git's configuration
  levels, used by tests and by callers that assemble settings themselves.
- :class:`GitConfig` -- asks the ``git`` binary, so the user's real
  system/global/local files apply without gitcred parsing them.
"""

from __future__ import annotations

import enum
import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ConfigLookup(Protocol):
    """Read-only key/value view of layered configuration."""

    def get_string(self, key: str) -> Optional[str]:
        """Return the value stored under *key*, or ``None``."""
        ...


class ConfigLevel(enum.IntEnum):
    """Priority of a configuration layer; higher values win.

    The numbering follows libgit2 so that levels can be passed through to
    bindings unchanged.
    """

    PROGRAMDATA = 1
    SYSTEM = 2
    XDG = 3
    GLOBAL = 4
    LOCAL = 5
    APP = 6
    HIGHEST = -1


def normalize_key(key: str) -> str:
    """Canonicalise *key* the way git compares configuration keys.

    The section and variable name are case-insensitive; the subsection in
    between (which for ``credential`` is a URL and may contain dots) is kept
    as written.

    Example::

        >>> normalize_key("Credential.https://Example.com.Helper")
        'credential.https://Example.com.helper'
    """
    section, dot, rest = key.partition(".")
    if not dot:
        return key.lower()
    subsection, dot, name = rest.rpartition(".")
    if not dot:
        return f"{section.lower()}.{name.lower()}"
    return f"{section.lower()}.{subsection}.{name.lower()}"


def _level_rank(level: ConfigLevel) -> int:
    return 1 << 30 if level is ConfigLevel.HIGHEST else int(level)


class MemoryConfig:
    """In-memory configuration with git's level precedence.

    Example::

        cfg = MemoryConfig()
        cfg.set_string("credential.helper", "store", ConfigLevel.GLOBAL)
        cfg.set_string("credential.helper", "cache", ConfigLevel.LOCAL)
        assert cfg.get_string("credential.helper") == "cache"
    """

    def __init__(self, values: Optional[dict[str, str]] = None) -> None:
        self._levels: dict[ConfigLevel, dict[str, str]] = {}
        for key, value in (values or {}).items():
            self.set_string(key, value)

    def set_string(
        self,
        key: str,
        value: str,
        level: ConfigLevel = ConfigLevel.HIGHEST,
    ) -> None:
        """Store *value* under *key* at *level*, replacing any previous value there."""
        self._levels.setdefault(level, {})[normalize_key(key)] = value

    def remove(self, key: str, level: ConfigLevel = ConfigLevel.HIGHEST) -> None:
        """Delete *key* from *level*. Missing keys are ignored."""
        self._levels.get(level, {}).pop(normalize_key(key), None)

    def get_string(self, key: str) -> Optional[str]:
        normalized = normalize_key(key)
        for level in sorted(self._levels, key=_level_rank, reverse=True):
            value = self._levels[level].get(normalized)
            if value is not None:
                return value
        return None

    def __repr__(self) -> str:
        count = sum(len(v) for v in self._levels.values())
        return f"MemoryConfig({count} keys)"


class GitConfig:
    """Configuration lookup backed by ``git config --get``.

    Without *file*, git applies its usual system, global and (when *cwd* is
    inside a repository) local precedence.

    Args:
        git: The git executable.
        cwd: Directory to run git in; selects the repository-local config.
        file: Read only this configuration file (``git config --file``).
    """

    def __init__(
        self,
        git: str = "git",
        cwd: Optional[Union[str, os.PathLike[str]]] = None,
        file: Optional[Union[str, os.PathLike[str]]] = None,
    ) -> None:
        self._git = git
        self._cwd = Path(cwd) if cwd is not None else None
        self._file = Path(file) if file is not None else None

    def _argv(self, key: str) -> list[str]:
        argv = [self._git, "config"]
        if self._file is not None:
            argv += ["--file", str(self._file)]
        argv += ["--get", key]
        return argv

    def get_string(self, key: str) -> Optional[str]:
        try:
            result = subprocess.run(
                self._argv(key),
                cwd=self._cwd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                encoding="utf-8",
            )
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Could not run %s config: %s", self._git, exc)
            return None
        if result.returncode == 1:
            return None
        if result.returncode != 0:
            logger.debug(
                "%s config --get %s exited with status %d",
                self._git,
                key,
                result.returncode,
            )
            return None
        # git terminates the value with exactly one newline.
        value = result.stdout
        return value[:-1] if value.endswith("\n") else value

    def __repr__(self) -> str:
        source = f"file={str(self._file)!r}" if self._file else f"cwd={str(self._cwd)!r}"
        return f"GitConfig({source})"
