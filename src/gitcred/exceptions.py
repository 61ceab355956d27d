"""Exception hierarchy for gitcred.

All exceptions inherit from :class:`GitcredError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`gitcred.exit_codes`.
The top-level error handler in :func:`gitcred.app.main` catches
``GitcredError`` and exits with the appropriate code.

Failures of individual credential helpers never raise: a helper that cannot
be spawned, exits non-zero, or breaks the pipe is simply "no answer". The
classes below cover the remaining cases.

Subclass hierarchy::

    GitcredError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- ConfigError         (exit 1)
"""

from gitcred.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class GitcredError(Exception):
    """Base exception for all gitcred errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(GitcredError):
    """Raised for invalid CLI arguments or a configuration handle without ``get_string``."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(GitcredError):
    """Raised when a username/password credential cannot be acquired for a URL."""

    exit_code = EXIT_AUTH_FAILURE


class ConfigError(GitcredError):
    """Raised for configuration problems (invalid settings file, failed lookups)."""

    exit_code = EXIT_GENERIC_FAILURE
