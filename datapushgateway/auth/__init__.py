"""Basic-auth credential loading and verification."""

from datapushgateway.auth.credentials import (
    DEFAULT_BCRYPT_ROUNDS,
    CredentialStore,
    hash_password,
    load_credentials,
)

__all__ = [
    "DEFAULT_BCRYPT_ROUNDS",
    "CredentialStore",
    "hash_password",
    "load_credentials",
]
