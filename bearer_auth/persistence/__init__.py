"""
Persistence module - credential storage

Provides:
- JSONStore: Locked, atomic JSON file handling
- CredentialStore: get / put-if-absent contract keyed by username
- InMemoryCredentialStore, JSONCredentialStore: implementations
"""

from .json_store import JSONStore, JSONStoreError, JSONStoreIOError, JSONStoreFormatError
from .credential_store import (
    Credential,
    CredentialStore,
    CredentialStoreError,
    InMemoryCredentialStore,
    JSONCredentialStore,
    PutResult,
)

__all__ = [
    "JSONStore",
    "JSONStoreError",
    "JSONStoreIOError",
    "JSONStoreFormatError",
    "Credential",
    "CredentialStore",
    "CredentialStoreError",
    "InMemoryCredentialStore",
    "JSONCredentialStore",
    "PutResult",
]
