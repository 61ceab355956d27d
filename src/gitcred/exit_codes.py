"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~gitcred.exceptions.GitcredError` subclass.
Shell wrappers can inspect the exit code to tell "no credential" apart
from a usage mistake without parsing stderr.

Example::

    $ gitcred get https://example.com/repo.git
    $ echo $?
    4   # EXIT_NOT_FOUND -- no helper supplied a username and password
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or a malformed configuration handle."""

EXIT_AUTH_FAILURE = 3
"""A credential object could not be built from the discovered data."""

EXIT_NOT_FOUND = 4
"""No credential could be discovered for the URL."""
