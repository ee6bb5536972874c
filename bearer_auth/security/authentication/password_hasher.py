"""
Password Hasher - bcrypt hashing and verification

Module: security.authentication.password_hasher
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - bcrypt with configurable cost factor
  - SHA-256 pre-hash so every password is accepted whole
  - Structural errors on stored hashes reported as HashingError

SECURITY NOTES:
- Random salt per hash: hashing the same password twice never matches
- bcrypt.checkpw compares in constant time
- bcrypt reads at most 72 bytes and rejects NUL bytes; the password is
  reduced to a base64 SHA-256 digest (44 ASCII bytes) first so that long
  passwords are not truncated and no input shape can fail
"""

import base64
import hashlib
import logging

import bcrypt

from ...core.constants import DEFAULT_BCRYPT_ROUNDS, MIN_BCRYPT_ROUNDS, MAX_BCRYPT_ROUNDS


class PasswordHasherError(Exception):
    """Base password hasher error"""
    pass


class HashingError(PasswordHasherError):
    """Hash could not be computed or stored hash is corrupt"""
    pass


class BcryptPasswordHasher:
    """
    One-way password hashing with bcrypt.

    Stored hashes are standard modular-crypt bcrypt strings ($2b$...),
    computed over the pre-hashed password.
    """

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        """
        Initialize hasher

        Args:
            rounds: bcrypt cost factor (log2 of iterations)

        Raises:
            ValueError: If rounds outside bcrypt's supported range
        """
        if not MIN_BCRYPT_ROUNDS <= rounds <= MAX_BCRYPT_ROUNDS:
            raise ValueError(
                f"bcrypt rounds must be between {MIN_BCRYPT_ROUNDS} and {MAX_BCRYPT_ROUNDS}"
            )

        self.logger = logging.getLogger("security.password_hasher")
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a password

        Args:
            password: Plaintext password

        Returns:
            bcrypt hash string

        Raises:
            HashingError: If bcrypt fails internally
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            hashed = bcrypt.hashpw(self._prepare(password), salt)
        except (ValueError, TypeError) as e:
            self.logger.error(f"bcrypt hashing failed: {e}")
            raise HashingError("Password hashing failed") from e
        return hashed.decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        """
        Check a password against a stored hash

        Args:
            password: Plaintext password
            hashed: Stored bcrypt hash

        Returns:
            True if the password matches, False otherwise

        Raises:
            HashingError: If the stored hash is not a valid bcrypt hash
        """
        try:
            hashed_bytes = hashed.encode("ascii")
        except (AttributeError, UnicodeEncodeError) as e:
            raise HashingError("Stored password hash is corrupt") from e

        try:
            return bcrypt.checkpw(self._prepare(password), hashed_bytes)
        except (ValueError, TypeError) as e:
            self.logger.error(f"bcrypt verification failed: {e}")
            raise HashingError("Stored password hash is corrupt") from e

    @staticmethod
    def _prepare(password: str) -> bytes:
        digest = hashlib.sha256(password.encode("utf-8", "surrogatepass")).digest()
        return base64.b64encode(digest)
