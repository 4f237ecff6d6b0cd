"""Basic-auth credentials loaded from a YAML auth file.

The auth file uses the Prometheus web configuration layout::

    basic_auth_users:
      alice: $2y$10$...
      bob: $2b$12$...

Values are bcrypt hashes. ``datapushgateway mkpasswd`` prints one.
"""

from __future__ import annotations

import types
import typing as typ

import bcrypt
import msgspec

from datapushgateway.common.yaml import load_yaml_struct
from datapushgateway.errors import ConfigError
from datapushgateway.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12


class _AuthFileDocument(msgspec.Struct, kw_only=True):
    basic_auth_users: dict[str, str] = msgspec.field(default_factory=dict)


class CredentialStore:
    """Immutable username to bcrypt hash mapping.

    Parameters
    ----------
    users
        Username to bcrypt hash. The mapping is copied.

    """

    __slots__ = ("_users",)

    def __init__(self, users: typ.Mapping[str, str]) -> None:
        """Freeze a copy of ``users``."""
        self._users = types.MappingProxyType(dict(users))

    @property
    def users(self) -> typ.Mapping[str, str]:
        """Read-only view of the stored hashes."""
        return self._users

    def __len__(self) -> int:
        """Number of configured users."""
        return len(self._users)

    def __contains__(self, username: object) -> bool:
        """Whether ``username`` is configured."""
        return username in self._users

    def verify(self, username: str, password: str) -> bool:
        """Return whether ``password`` matches the hash stored for ``username``.

        Unknown users and malformed hashes are rejected rather than raised.
        """
        hashed = self._users.get(username)
        if hashed is None:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False


def load_credentials(path: Path | str) -> CredentialStore:
    """Load the auth file at ``path``.

    Raises
    ------
    ConfigError
        If the file is unreadable, malformed, or defines no users.

    """
    document = load_yaml_struct(path, _AuthFileDocument, label="auth file")
    issues = [
        f"basic_auth_users: empty entry for user {name!r}"
        for name, hashed in document.basic_auth_users.items()
        if not name or not hashed
    ]
    if not document.basic_auth_users:
        issues.append("basic_auth_users must define at least one user")
    if issues:
        raise ConfigError(issues)
    store = CredentialStore(document.basic_auth_users)
    log_info(logger, "Loaded %d basic-auth user(s) from %s", len(store), path)
    return store


def hash_password(password: str, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Return a bcrypt hash of ``password`` suitable for the auth file."""
    if not password:
        msg = "password must not be empty"
        raise ValueError(msg)
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


__all__ = [
    "DEFAULT_BCRYPT_ROUNDS",
    "CredentialStore",
    "hash_password",
    "load_credentials",
]
