"""Management of the ``gitcredentials(7)`` interface.

:class:`CredentialHelper` is the entry point for credential discovery. One
instance serves one request:

1. The URL is decomposed into protocol and host (:mod:`gitcred.url`).
2. :meth:`CredentialHelper.config` reads ``credential.*`` settings in
   precedence order -- exact URL, then ``<protocol>://<host>``, then the
   global section -- picking up a username and every configured helper.
3. :meth:`CredentialHelper.execute` runs the helpers one at a time until a
   username and a password are both known.

Helpers never make discovery fail. A broken helper is indistinguishable
from one that has nothing stored, and "no credential" is returned as
``None`` rather than raised.

See also:
    https://git-scm.com/docs/gitcredentials#_configuration_options
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, NamedTuple, Optional

from gitcred.exceptions import ConfigError, InvalidUsageError
from gitcred.executor import DEFAULT_SHELL, run_helper
from gitcred.gitconfig import ConfigLookup
from gitcred.models import DiscoveryResult, ParsedReply
from gitcred.normalize import normalize_command
from gitcred.url import decompose_url

logger = logging.getLogger(__name__)

HelperRunner = Callable[[str, Optional[str]], ParsedReply]
"""Runs one normalized command given the username known so far."""


class _Discovery(NamedTuple):
    username: Optional[str]
    password: Optional[str]

    @property
    def complete(self) -> bool:
        return self.username is not None and self.password is not None


def _merge(state: _Discovery, reply: ParsedReply) -> _Discovery:
    # Earlier helpers win; a reply only fills fields that are still unknown.
    return _Discovery(
        username=state.username if state.username is not None else reply.username,
        password=state.password if state.password is not None else reply.password,
    )


def discover(
    commands: Iterable[str],
    username: Optional[str],
    run: HelperRunner,
) -> Optional[DiscoveryResult]:
    """Fold helper replies into a username/password pair.

    Each command is run with the username known at that point, so a later
    helper can look up the password for a username an earlier source
    supplied. Iteration stops as soon as both fields are known; the
    remaining helpers are never started.

    Args:
        commands: Normalized commands in precedence order.
        username: Username known before any helper runs.
        run: Callable executing one command, see :data:`HelperRunner`.

    Returns:
        The discovered pair, or ``None`` if the helpers ran out first.
    """
    state = _Discovery(username=username, password=None)
    for command in commands:
        if state.complete:
            break
        state = _merge(state, run(command, state.username))
    if not state.complete:
        return None
    return DiscoveryResult(username=state.username, password=state.password)


class CredentialHelper:
    """Discover a username/password for a URL from configured helpers.

    The URL's protocol and host are fixed at construction. Unparsable URLs
    are accepted and simply leave both unknown, so only the exact-URL and
    global configuration keys apply.

    Args:
        url: The remote URL credentials are wanted for.
        shell: POSIX shell used to launch helpers.
        timeout: Optional per-helper timeout in seconds.
        windows_paths: Treat ``C:\\...`` helper values as absolute paths.

    Example::

        helper = CredentialHelper("https://example.com/foo/bar")
        found = helper.with_username("alice").config(GitConfig()).execute()
    """

    def __init__(
        self,
        url: str,
        shell: str = DEFAULT_SHELL,
        timeout: Optional[float] = None,
        windows_paths: bool = False,
    ) -> None:
        parts = decompose_url(url)
        self._url = url
        self._protocol = parts.protocol
        self._host = parts.host
        self._commands: list[str] = []
        self._shell = shell
        self._timeout = timeout
        self._windows_paths = windows_paths
        self.username: Optional[str] = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def protocol(self) -> Optional[str]:
        return self._protocol

    @property
    def host(self) -> Optional[str]:
        return self._host

    @property
    def commands(self) -> tuple[str, ...]:
        """Normalized helper commands in the order they will run."""
        return tuple(self._commands)

    def with_username(self, username: Optional[str]) -> CredentialHelper:
        """Seed the username helpers are queried with.

        An empty string counts as unknown. Configuration never overrides a
        username set here.
        """
        self.username = username or None
        return self

    # --- configuration keys ---

    def exact_key(self, name: str) -> str:
        """Key scoped to the full URL, e.g. ``credential.https://h/p.helper``."""
        return f"credential.{self._url}.{name}"

    def url_key(self, name: str) -> Optional[str]:
        """Key scoped to ``<protocol>://<host>``, or ``None`` if either is unknown."""
        if self._protocol is None or self._host is None:
            return None
        return f"credential.{self._protocol}://{self._host}.{name}"

    def candidate_keys(self, name: str) -> list[str]:
        """All keys consulted for *name*, highest precedence first."""
        keys = [self.exact_key(name)]
        url_key = self.url_key(name)
        if url_key is not None:
            keys.append(url_key)
        keys.append(f"credential.{name}")
        return keys

    # --- configuration ---

    def config(self, config: ConfigLookup) -> CredentialHelper:
        """Read the username and helper commands from *config*.

        Args:
            config: Any object with ``get_string(key) -> Optional[str]``.

        Returns:
            ``self``, for chaining into :meth:`execute`.

        Raises:
            InvalidUsageError: If *config* has no callable ``get_string``.
        """
        if not callable(getattr(config, "get_string", None)):
            raise InvalidUsageError(
                f"Configuration handle {type(config).__name__} has no get_string() method"
            )
        # TODO: honour credential.useHttpPath by adding the URL path to url_key().
        self.config_username(config)
        self.config_helpers(config)
        return self

    def config_username(self, config: ConfigLookup) -> None:
        """Fill in the username from the first configuration key that has one."""
        if self.username:
            return
        for key in self.candidate_keys("username"):
            value = _lookup(config, key)
            if value:
                self.username = value
                return

    def config_helpers(self, config: ConfigLookup) -> None:
        """Append a command for every configured ``helper`` key, in precedence order."""
        for key in self.candidate_keys("helper"):
            self.add_command(_lookup(config, key))

    def add_command(self, value: Optional[str]) -> None:
        """Normalize a raw helper value and queue it. Absent values are ignored."""
        command = normalize_command(value, windows_paths=self._windows_paths)
        if command is not None:
            self._commands.append(command)

    # --- execution ---

    def execute_cmd(self, command: str, username: Optional[str]) -> ParsedReply:
        """Run a single helper command for this URL."""
        return run_helper(
            command,
            protocol=self._protocol,
            host=self._host,
            username=username,
            shell=self._shell,
            timeout=self._timeout,
        )

    def execute(self) -> Optional[DiscoveryResult]:
        """Run the configured helpers and return the first complete credential.

        All helper failures are ignored, as git ignores them. The call only
        succeeds when both a username and a password were found.

        Returns:
            A :class:`~gitcred.models.DiscoveryResult`, or ``None``.
        """
        logger.debug(
            "Discovering credentials with %d helper(s) for protocol=%s host=%s",
            len(self._commands),
            self._protocol,
            self._host,
        )
        return discover(self._commands, self.username, self.execute_cmd)

    def __repr__(self) -> str:
        return (
            f"CredentialHelper(protocol={self._protocol!r}, host={self._host!r}, "
            f"commands={len(self._commands)})"
        )


def _lookup(config: ConfigLookup, key: str) -> Optional[str]:
    try:
        return config.get_string(key)
    except ConfigError as exc:
        logger.debug("Lookup of %s failed: %s", key, exc)
        return None
