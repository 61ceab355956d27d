"""gitcred -- Discover credentials through git credential helpers.

This package reimplements the ``gitcredentials(7)`` helper protocol. Given a
remote URL it looks up ``credential.*`` settings in a configuration service,
runs the configured helper programs in precedence order, and assembles a
username/password pair from their replies.

Typical usage::

    from gitcred import CredentialHelper, GitConfig

    found = CredentialHelper("https://example.com/repo.git").config(GitConfig()).execute()
    if found is not None:
        print(found.username, found.password)

Modules:
    helper: :class:`CredentialHelper` and the discovery fold.
    url: URL decomposition into protocol/host.
    normalize: Helper command normalization.
    executor: Helper process execution and reply parsing.
    gitconfig: Configuration lookup services.
    cred: Credential objects handed to a transport layer.
    app: Typer application and CLI entry point.
"""

from gitcred.cred import Cred, CredentialType
from gitcred.gitconfig import ConfigLevel, ConfigLookup, GitConfig, MemoryConfig
from gitcred.helper import CredentialHelper, discover
from gitcred.models import DiscoveryResult, ParsedReply

__version__ = "0.1.0"

__all__ = [
    "ConfigLevel",
    "ConfigLookup",
    "Cred",
    "CredentialHelper",
    "CredentialType",
    "DiscoveryResult",
    "GitConfig",
    "MemoryConfig",
    "ParsedReply",
    "discover",
]
