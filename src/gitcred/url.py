"""URL decomposition into the ``protocol``/``host`` pair used for helper lookup.

Credential helpers are keyed on the protocol and host of the remote, not on
the full URL. :func:`decompose_url` extracts both, treating ``git://`` and
``ssh://`` as network schemes (default ports 9418 and 22) alongside the
usual web schemes.

The URL is only a lookup key here, so a malformed URL is never an error: it
decomposes to an empty :class:`UrlParts` and discovery carries on with the
global ``credential.*`` settings alone.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple, Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

GIT_PORTS: dict[str, int] = {
    "git": 9418,
    "ssh": 22,
}
"""Schemes the git ecosystem adds to the network scheme table."""

WEB_PORTS: dict[str, int] = {
    "ftp": 21,
    "gopher": 70,
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
}
"""Standard web schemes and their default ports."""

_HOST_INVALID = re.compile(r"[\x00-\x20#%/:<>?@\[\\\]^|]")


class UrlParts(NamedTuple):
    """Result of :func:`decompose_url`.

    Attributes:
        protocol: Lowercased scheme, or ``None`` if the URL was unparsable.
        host: Lowercased host name, or ``None`` if the URL has no domain host.
        port: Explicit port, or the scheme's default port for network schemes.
    """

    protocol: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None


def default_port(scheme: str) -> Optional[int]:
    """Return the default port for *scheme*, or ``None`` for non-network schemes."""
    scheme = scheme.lower()
    if scheme in GIT_PORTS:
        return GIT_PORTS[scheme]
    return WEB_PORTS.get(scheme)


def _is_domain(host: str) -> bool:
    # IPv6 literals come back from urlsplit without brackets.
    return ":" not in host and not _HOST_INVALID.search(host)


def decompose_url(url: str) -> UrlParts:
    """Split *url* into its protocol, host and effective port.

    Args:
        url: The remote URL, e.g. ``https://example.com/org/repo.git``.

    Returns:
        A :class:`UrlParts`. Network schemes with a valid host fill all three
        fields. ``file`` and opaque schemes (``mailto:``, ``foo:bar``) only
        carry a protocol. Unparsable input yields ``UrlParts()``.

    Example::

        >>> decompose_url("git://example.com/repo")
        UrlParts(protocol='git', host='example.com', port=9418)
        >>> decompose_url("not a url")
        UrlParts(protocol=None, host=None, port=None)
    """
    try:
        parts = urlsplit(url)
        explicit_port = parts.port
    except ValueError:
        logger.debug("Ignoring unparsable credential URL")
        return UrlParts()

    scheme = parts.scheme.lower()
    if not scheme:
        logger.debug("Ignoring credential URL without a scheme")
        return UrlParts()

    port = default_port(scheme)
    if port is None:
        # file:// and opaque schemes have no network host.
        return UrlParts(protocol=scheme)

    host = (parts.hostname or "").lower()
    if not host:
        logger.debug("Ignoring %s URL with an empty host", scheme)
        return UrlParts()
    if not _is_domain(host):
        if ":" in host:
            return UrlParts(protocol=scheme, port=explicit_port or port)
        logger.debug("Ignoring %s URL with an invalid host", scheme)
        return UrlParts()

    return UrlParts(protocol=scheme, host=host, port=explicit_port or port)
