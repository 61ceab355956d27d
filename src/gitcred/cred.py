"""Credential objects handed to a transport layer.

A :class:`Cred` is plain data: it records which authentication mechanism
the transport should use and the material it needs. gitcred builds these
objects but never uses them, so the constructors other than
:meth:`Cred.credential_helper` are simple pass-throughs.

The :class:`CredentialType` values match libgit2's ``git_credential_t`` so
that a binding can forward ``credtype`` unchanged.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gitcred.exceptions import AuthError, InvalidUsageError
from gitcred.gitconfig import ConfigLookup
from gitcred.helper import CredentialHelper


class CredentialType(enum.IntFlag):
    """Authentication mechanisms a credential can represent."""

    USERPASS_PLAINTEXT = 1 << 0
    SSH_KEY = 1 << 1
    SSH_CUSTOM = 1 << 2
    DEFAULT = 1 << 3
    SSH_INTERACTIVE = 1 << 4
    USERNAME = 1 << 5
    SSH_MEMORY = 1 << 6


class Cred(BaseModel):
    """A credential ready for a transport to consume.

    Build instances through the classmethod constructors rather than
    directly.

    Attributes:
        credtype: The mechanism this credential represents.
        username: Username to authenticate as, when the mechanism has one.
        password: Plaintext password (``USERPASS_PLAINTEXT`` only).
        public_key: Public key path (``SSH_KEY`` only, optional).
        private_key: Private key path (``SSH_KEY`` only). ``None`` together
            with ``SSH_KEY`` means "ask the ssh-agent".
        passphrase: Passphrase for *private_key*, if it is encrypted.

    Example::

        cred = Cred.userpass_plaintext("alice", "s3cret")
        assert cred.credtype is CredentialType.USERPASS_PLAINTEXT
        assert cred.has_username()
    """

    model_config = ConfigDict(frozen=True)

    credtype: CredentialType
    username: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    public_key: Optional[Path] = None
    private_key: Optional[Path] = None
    passphrase: Optional[str] = Field(default=None, repr=False)

    @classmethod
    def default(cls) -> Cred:
        """A "default" credential for Negotiate mechanisms such as NTLM or Kerberos."""
        return cls(credtype=CredentialType.DEFAULT)

    @classmethod
    def ssh_key_from_agent(cls, username: str) -> Cred:
        """An SSH key credential that queries the running ssh-agent.

        Args:
            username: The username to authenticate as.
        """
        _require_text("username", username)
        return cls(credtype=CredentialType.SSH_KEY, username=username)

    @classmethod
    def ssh_key(
        cls,
        username: str,
        publickey: Optional[Path],
        privatekey: Path,
        passphrase: Optional[str] = None,
    ) -> Cred:
        """An SSH key credential read from key files on disk.

        Args:
            username: The username to authenticate as.
            publickey: Path to the public key, or ``None`` to derive it.
            privatekey: Path to the private key.
            passphrase: Passphrase protecting *privatekey*, if any.
        """
        _require_text("username", username)
        if passphrase is not None:
            _require_text("passphrase", passphrase)
        return cls(
            credtype=CredentialType.SSH_KEY,
            username=username,
            public_key=Path(publickey) if publickey is not None else None,
            private_key=Path(privatekey),
            passphrase=passphrase,
        )

    @classmethod
    def userpass_plaintext(cls, username: str, password: str) -> Cred:
        """A plain-text username and password credential."""
        _require_text("username", username)
        _require_text("password", password)
        return cls(
            credtype=CredentialType.USERPASS_PLAINTEXT,
            username=username,
            password=password,
        )

    @classmethod
    def credential_helper(
        cls,
        config: ConfigLookup,
        url: str,
        username: Optional[str] = None,
        **helper_options: object,
    ) -> Cred:
        """Build a username/password credential from ``credential.helper`` settings.

        Parses the user's credential configuration for *url*, runs the
        configured helpers and wraps their answer with
        :meth:`userpass_plaintext`. See ``gitcredentials(7)``.

        Args:
            config: The configuration lookup service.
            url: The remote URL.
            username: Username to query helpers with, if already known.
            **helper_options: Passed to :class:`~gitcred.helper.CredentialHelper`
                (``shell``, ``timeout``, ``windows_paths``).

        Raises:
            AuthError: If no helper produced both a username and a password.
            InvalidUsageError: If *config* is not a configuration lookup.
        """
        helper = CredentialHelper(url, **helper_options)  # type: ignore[arg-type]
        found = helper.with_username(username).config(config).execute()
        if found is None:
            raise AuthError("failed to acquire username/password from local configuration")
        return cls.userpass_plaintext(found.username, found.password)

    def has_username(self) -> bool:
        """Return ``True`` if this credential carries username information."""
        return self.username is not None and self.credtype in (
            CredentialType.USERPASS_PLAINTEXT
            | CredentialType.SSH_KEY
            | CredentialType.SSH_CUSTOM
            | CredentialType.SSH_INTERACTIVE
            | CredentialType.USERNAME
            | CredentialType.SSH_MEMORY
        )


def _require_text(name: str, value: str) -> None:
    # NUL bytes cannot cross into C-level transports.
    if "\x00" in value:
        raise InvalidUsageError(f"{name} must not contain NUL bytes")
