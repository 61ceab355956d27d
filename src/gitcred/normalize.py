"""Turn configured ``credential.helper`` values into shell command lines.

git accepts three spellings for a helper (see ``gitcredentials(7)``), tried
in this order:

1. ``!<shell>`` -- everything after the ``!`` is run as a shell expression,
   which allows inline functions such as ``!f() { echo password=x; }; f``.
2. An absolute path (``/usr/libexec/helper``, ``\\\\server\\helper``, or with
   the drive-letter rule enabled ``C:\\helper.exe``) -- quoted so the path
   survives the shell with embedded spaces.
3. Anything else is a short name ``X`` run as ``git credential-X``.

The order matters: a short name must never be run as a path, and a path
must never be re-read as a short name.
"""

from __future__ import annotations

import re
from typing import Optional

_DRIVE_PATH = re.compile(r"^[A-Za-z]:\\")


def is_absolute_helper(value: str, windows_paths: bool = False) -> bool:
    """Return ``True`` if *value* names a helper executable by absolute path.

    Args:
        value: The raw configured helper value.
        windows_paths: Also accept drive-letter paths such as ``C:\\bin\\x``.
    """
    if value.startswith(("/", "\\")):
        return True
    return windows_paths and bool(_DRIVE_PATH.match(value))


def normalize_command(value: Optional[str], windows_paths: bool = False) -> Optional[str]:
    """Convert a configured helper value into an invocable command line.

    Args:
        value: The raw ``credential.helper`` value, or ``None`` when the key
            was not set.
        windows_paths: Enable the drive-letter absolute path rule.

    Returns:
        The command line to which ``" get"`` is appended at execution time,
        or ``None`` when *value* is absent or empty.

    Example::

        >>> normalize_command("store")
        'git credential-store'
        >>> normalize_command("/opt/my helper")
        '"/opt/my helper"'
        >>> normalize_command("!f() { echo username=a; }; f")
        'f() { echo username=a; }; f'
    """
    if not value:
        return None
    if value.startswith("!"):
        return value[1:]
    if is_absolute_helper(value, windows_paths):
        return f'"{value}"'
    return f"git credential-{value}"
