"""
Credential Store - Username -> password hash records

Module: persistence.credential_store
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - CredentialStore contract (get_by_username, put_if_absent)
  - InMemoryCredentialStore for tests and single-process use
  - JSONCredentialStore persisted in credentials.json

ARCHITECTURE:
The store only knows about usernames and opaque password hashes. Hashing
and verification belong to the PasswordHasher; the store never sees a
plaintext password.

SECURITY NOTES:
- put_if_absent is the only way to create a record and is atomic:
  two concurrent registrations of one username yield exactly one CREATED
- Records are never updated in place
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from .json_store import JSONStore, JSONStoreError


class CredentialStoreError(Exception):
    """Credential backend unavailable or corrupt"""
    pass


class PutResult(Enum):
    """Outcome of put_if_absent"""
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class Credential:
    """Stored credential for one username"""
    username: str
    password_hash: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON storage"""
        return {
            "username": self.username,
            "password_hash": self.password_hash,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Credential":
        """Create from dictionary (from JSON)"""
        return cls(
            username=data["username"],
            password_hash=data["password_hash"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )


class CredentialStore(ABC):
    """Key/value contract for credentials, keyed by username"""

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[Credential]:
        """
        Look up a credential

        Returns:
            Credential if found, None otherwise

        Raises:
            CredentialStoreError: If the backend cannot be read
        """

    @abstractmethod
    def put_if_absent(self, credential: Credential) -> PutResult:
        """
        Atomically create a credential unless the username is taken

        Returns:
            PutResult.CREATED or PutResult.ALREADY_EXISTS

        Raises:
            CredentialStoreError: If the backend cannot be written
        """


class InMemoryCredentialStore(CredentialStore):
    """Dictionary-backed store guarded by a lock"""

    def __init__(self):
        self.logger = logging.getLogger("persistence.InMemoryCredentialStore")
        self._credentials: Dict[str, Credential] = {}
        self._lock = threading.Lock()

    def get_by_username(self, username: str) -> Optional[Credential]:
        with self._lock:
            return self._credentials.get(username)

    def put_if_absent(self, credential: Credential) -> PutResult:
        with self._lock:
            if credential.username in self._credentials:
                return PutResult.ALREADY_EXISTS
            self._credentials[credential.username] = credential

        self.logger.debug(f"Credential stored: {credential.username}")
        return PutResult.CREATED

    def __len__(self) -> int:
        with self._lock:
            return len(self._credentials)


class JSONCredentialStore(CredentialStore):
    """
    Credentials persisted in <data_dir>/credentials.json.

    Records live in a "credentials" object keyed by username. The
    existence check and the insert run in one JSONStore transaction, which
    holds an exclusive file lock, so concurrent registrations from threads
    or processes sharing the file cannot both succeed.
    """

    FILE_NAME = "credentials.json"

    def __init__(self, data_dir: str = "./data"):
        """
        Initialize credential store

        Args:
            data_dir: Directory for data files

        Raises:
            CredentialStoreError: If the store file cannot be created
        """
        self.logger = logging.getLogger("persistence.JSONCredentialStore")
        self.data_dir = Path(data_dir)
        self.credentials_file = self.data_dir / self.FILE_NAME

        try:
            self.store = JSONStore(str(self.credentials_file), {"credentials": {}})
        except (JSONStoreError, OSError) as e:
            raise CredentialStoreError(f"Cannot open credential store: {e}") from e

        self.logger.info(f"JSONCredentialStore initialized (file={self.credentials_file})")

    def get_by_username(self, username: str) -> Optional[Credential]:
        try:
            data = self.store.load()
        except JSONStoreError as e:
            raise CredentialStoreError(f"Cannot read credential store: {e}") from e

        record = self._credentials(data).get(username)
        if record is None:
            return None

        try:
            return Credential.from_dict(record)
        except (KeyError, TypeError, ValueError) as e:
            raise CredentialStoreError(f"Corrupt credential record for '{username}': {e}") from e

    def put_if_absent(self, credential: Credential) -> PutResult:
        result = PutResult.CREATED
        try:
            with self.store.transaction() as data:
                credentials = self._credentials(data)
                if credential.username in credentials:
                    result = PutResult.ALREADY_EXISTS
                else:
                    credentials[credential.username] = credential.to_dict()
        except JSONStoreError as e:
            raise CredentialStoreError(f"Cannot write credential store: {e}") from e

        if result is PutResult.CREATED:
            self.logger.info(f"Credential stored: {credential.username}")
        return result

    def _credentials(self, data: Any) -> Dict[str, Any]:
        """The "credentials" object of the document, created if missing"""
        if not isinstance(data, dict):
            raise CredentialStoreError(f"Corrupt credential store {self.credentials_file}: not an object")
        credentials = data.setdefault("credentials", {})
        if not isinstance(credentials, dict):
            raise CredentialStoreError(
                f"Corrupt credential store {self.credentials_file}: \"credentials\" is not an object"
            )
        return credentials
