"""
Key Provider - EC key material for signing and verification

Module: security.authentication.key_provider
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - KeyProvider contract with "signing" and "verification" slots
  - FileKeyProvider (PEM files, read on every call)
  - StaticKeyProvider (embedded PEM blobs)
  - EC P-256 key pair generation for provisioning

ARCHITECTURE:
Signing and verification code receive a KeyProvider instead of reading a
global key. Providers return raw PEM bytes; parsing is done by the
consumer so that a bad key surfaces as that consumer's error.

SECURITY NOTES:
- Private key files are written with mode 0600
- No caching: a key swapped on disk is picked up on the next call
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ...core.constants import (
    SIGNING_KEY_SLOT,
    VERIFICATION_KEY_SLOT,
    PRIVATE_KEY_FILE,
    PUBLIC_KEY_FILE,
)


class KeyProviderError(Exception):
    """Base key provider error"""
    pass


class KeyUnavailableError(KeyProviderError):
    """Key material for a slot could not be obtained"""

    def __init__(self, slot: str, detail: str = ""):
        self.slot = slot
        self.detail = detail
        message = f"Key unavailable for slot '{slot}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class KeyProvider(ABC):
    """Supplies PEM-encoded EC key material on demand"""

    @abstractmethod
    def private_key(self) -> bytes:
        """
        PEM bytes for the signing slot

        Raises:
            KeyUnavailableError: If the key cannot be obtained
        """

    @abstractmethod
    def public_key(self) -> bytes:
        """
        PEM bytes for the verification slot

        Raises:
            KeyUnavailableError: If the key cannot be obtained
        """


class FileKeyProvider(KeyProvider):
    """Reads PEM files from disk on every call"""

    def __init__(
        self,
        private_key_path: Optional[str] = None,
        public_key_path: Optional[str] = None,
    ):
        """
        Args:
            private_key_path: Path to the private PEM (None for verify-only)
            public_key_path: Path to the public PEM
        """
        self.logger = logging.getLogger("security.key_provider")
        self.private_key_path = Path(private_key_path) if private_key_path else None
        self.public_key_path = Path(public_key_path) if public_key_path else None

    @classmethod
    def from_directory(cls, keys_dir: str) -> "FileKeyProvider":
        """Provider for the standard file names inside keys_dir"""
        base = Path(keys_dir)
        return cls(str(base / PRIVATE_KEY_FILE), str(base / PUBLIC_KEY_FILE))

    def private_key(self) -> bytes:
        return self._read(SIGNING_KEY_SLOT, self.private_key_path)

    def public_key(self) -> bytes:
        return self._read(VERIFICATION_KEY_SLOT, self.public_key_path)

    def _read(self, slot: str, path: Optional[Path]) -> bytes:
        if path is None:
            raise KeyUnavailableError(slot, "no key file configured")
        try:
            data = path.read_bytes()
        except OSError as e:
            self.logger.error(f"Cannot read {slot} key from {path}: {e}")
            raise KeyUnavailableError(slot, str(e)) from e
        if not data.strip():
            raise KeyUnavailableError(slot, f"{path} is empty")
        return data


class StaticKeyProvider(KeyProvider):
    """Serves PEM blobs held in memory (embedded assets, secret stores)"""

    def __init__(self, private_pem: Optional[bytes] = None, public_pem: Optional[bytes] = None):
        self._private_pem = private_pem
        self._public_pem = public_pem

    def private_key(self) -> bytes:
        if not self._private_pem:
            raise KeyUnavailableError(SIGNING_KEY_SLOT, "no private key supplied")
        return self._private_pem

    def public_key(self) -> bytes:
        if not self._public_pem:
            raise KeyUnavailableError(VERIFICATION_KEY_SLOT, "no public key supplied")
        return self._public_pem


def generate_ec_key_pair() -> Tuple[bytes, bytes]:
    """
    Generate an EC P-256 key pair.

    Returns (private_pem, public_pem): PKCS8 private key without
    encryption and SubjectPublicKeyInfo public key.
    """
    private_key = ec.generate_private_key(ec.SECP256R1())

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


def write_key_pair(keys_dir: str, overwrite: bool = False) -> Tuple[Path, Path]:
    """
    Generate a key pair and write it under keys_dir

    Args:
        keys_dir: Target directory (created if missing)
        overwrite: Replace existing key files

    Returns:
        (private_path, public_path)

    Raises:
        FileExistsError: If a key file exists and overwrite is False
    """
    base = Path(keys_dir)
    base.mkdir(parents=True, exist_ok=True)
    private_path = base / PRIVATE_KEY_FILE
    public_path = base / PUBLIC_KEY_FILE

    if not overwrite:
        for path in (private_path, public_path):
            if path.exists():
                raise FileExistsError(f"{path} already exists")

    private_pem, public_pem = generate_ec_key_pair()

    fd = os.open(private_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(private_pem)
    private_path.chmod(0o600)
    public_path.write_bytes(public_pem)

    logging.getLogger("security.key_provider").info(f"Key pair written to {base}")
    return private_path, public_path
