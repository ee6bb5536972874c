"""
Authentication Service - registration and login

Module: core.auth_service
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - register(): hash password, atomic put-if-absent
  - login(): lookup, verify, issue bearer token
  - Unknown user and wrong password reported as one failure

ARCHITECTURE:
AuthenticationService orchestrates:
  CredentialStore -> PasswordHasher -> TokenIssuer
It holds no mutable state of its own and may be shared across threads.

SECURITY NOTES:
- Unknown user and wrong password raise the same AuthenticationFailedError
  with the same message; only .reason (server-side) tells them apart
- An unknown user still costs one bcrypt verification, so timing does not
  reveal which usernames exist
- Uniqueness relies on the store's put_if_absent, never on read-then-write
"""

import logging
import secrets
from datetime import timedelta
from enum import Enum
from typing import Optional

from ..persistence.credential_store import Credential, CredentialStore, PutResult
from ..security.authentication.password_hasher import BcryptPasswordHasher
from ..security.authentication.token_issuer import TokenIssuer, IssuedToken


class AuthServiceError(Exception):
    """Base authentication service error"""
    pass


class CredentialExistsError(AuthServiceError):
    """Username already registered"""
    pass


class FailureReason(Enum):
    """Server-side detail of a failed login"""
    NOT_FOUND = "not_found"
    WRONG_PASSWORD = "wrong_password"


class AuthenticationFailedError(AuthServiceError):
    """Login refused; the message never says why"""

    def __init__(self, reason: FailureReason):
        self.reason = reason
        super().__init__("Authentication failed")


class AuthenticationService:
    """
    Registers users and exchanges passwords for bearer tokens.

    Typical usage:
        service = AuthenticationService(store, hasher, issuer)
        service.register("alice", "s3cret")
        issued = service.login("alice", "s3cret")
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: BcryptPasswordHasher,
        issuer: TokenIssuer,
        token_ttl: Optional[timedelta] = None,
    ):
        """
        Initialize authentication service

        Args:
            store: Credential persistence
            hasher: Password hasher
            issuer: Token issuer
            token_ttl: Token lifetime (issuer default if None)

        Raises:
            HashingError: If the timing-equalization hash cannot be computed
        """
        self.logger = logging.getLogger("core.auth_service")
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.token_ttl = token_ttl

        # Verified against when the username is unknown
        self._dummy_hash = hasher.hash(secrets.token_urlsafe(16))

    def register(self, username: str, password: str) -> Credential:
        """
        Register a new user

        Args:
            username: Unique username
            password: Plaintext password

        Returns:
            The stored Credential

        Raises:
            ValueError: If username is empty or password is not a string
            CredentialExistsError: If username is already registered
            HashingError: If the password cannot be hashed
            CredentialStoreError: If the store fails
        """
        if not isinstance(username, str) or not username:
            raise ValueError("username required")
        if not isinstance(password, str):
            raise ValueError("password must be a string")

        credential = Credential(username=username, password_hash=self.hasher.hash(password))

        if self.store.put_if_absent(credential) is PutResult.ALREADY_EXISTS:
            self.logger.warning(f"Registration refused, username taken: {username}")
            raise CredentialExistsError(f"Username '{username}' already registered")

        self.logger.info(f"User registered: {username}")
        return credential

    def login(self, username: str, password: str) -> IssuedToken:
        """
        Exchange username/password for a bearer token

        Returns:
            IssuedToken for the user

        Raises:
            ValueError: If username or password is not a string
            AuthenticationFailedError: Unknown user or wrong password
            HashingError: If the stored hash is corrupt
            SigningError: If the token cannot be signed
            CredentialStoreError: If the store fails
        """
        if not isinstance(username, str) or not isinstance(password, str):
            raise ValueError("username and password must be strings")

        credential = self.store.get_by_username(username)
        if credential is None:
            self.hasher.verify(password, self._dummy_hash)
            self.logger.warning(f"Login failed for {username}: {FailureReason.NOT_FOUND.value}")
            raise AuthenticationFailedError(FailureReason.NOT_FOUND)

        if not self.hasher.verify(password, credential.password_hash):
            self.logger.warning(f"Login failed for {username}: {FailureReason.WRONG_PASSWORD.value}")
            raise AuthenticationFailedError(FailureReason.WRONG_PASSWORD)

        issued = self.issuer.issue(username, ttl=self.token_ttl)
        self.logger.info(f"User logged in: {username}")
        return issued
