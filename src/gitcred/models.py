"""Canonical Pydantic models shared across gitcred modules.

The models fall into two groups:

**Discovery models** -- transient values produced while running helpers:
    :class:`ParsedReply` (one helper's answer) and :class:`DiscoveryResult`
    (the final username/password pair).

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`Settings`.

Discovery models are frozen. Once a helper has answered, nothing downstream
may change what it said.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Discovery ---


class ParsedReply(BaseModel):
    """The ``username``/``password`` fields read from one helper's stdout.

    Either field may be missing. A helper that failed, or printed nothing
    useful, produces an empty reply.
    """

    model_config = ConfigDict(frozen=True)

    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.username is None and self.password is None


class DiscoveryResult(BaseModel):
    """A complete username/password pair found by credential discovery.

    Returned by :meth:`~gitcred.helper.CredentialHelper.execute` when both
    fields were supplied. Discovery that finds nothing returns ``None``
    instead of a partially filled result.

    Example::

        result = DiscoveryResult(username="a", password="b")
        user, password = result.as_tuple()
    """

    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(repr=False)

    def as_tuple(self) -> tuple[str, str]:
        """Return the pair as ``(username, password)``."""
        return self.username, self.password


# --- Settings ---


class Settings(BaseModel):
    """Settings for the gitcred tool itself.

    These do not come from git configuration. They control how helpers are
    launched and are stored in ``<config_dir>/config.json``.

    Example::

        Settings(shell="/bin/bash", timeout=10.0)
    """

    shell: str = Field(
        default="sh",
        description="POSIX shell used to launch helpers as '<shell> -c \"<cmd> get\"'",
    )
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds to wait for a single helper before killing it (None = wait forever)",
    )
    windows_paths: bool = Field(
        default_factory=lambda: os.name == "nt",
        description="Treat helper values like 'C:\\path' as absolute executable paths",
    )
    git_executable: str = Field(
        default="git",
        description="git binary used to read credential.* configuration",
    )
