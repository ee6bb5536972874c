"""
Token Issuer - ES256 bearer token signing

Module: security.authentication.token_issuer
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - ClaimSet {sub, exp} signed with ES256
  - Configurable default lifetime (1 hour)
  - Key parse and signing failures reported as SigningError

ARCHITECTURE:
TokenIssuer asks the KeyProvider for the private key on every call,
parses it with cryptography, and signs with PyJWT using one fixed
algorithm name.

SECURITY NOTES:
- Only EC P-256 private keys are accepted for ES256
- Tokens carry no secret data; claims are readable by anyone holding one
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ...core.constants import TOKEN_ALGORITHM, TOKEN_TYPE, DEFAULT_TOKEN_TTL_SECONDS
from .claims import ClaimSet, TokenError
from .key_provider import KeyProvider, KeyUnavailableError


class SigningError(TokenError):
    """Token could not be signed"""
    pass


@dataclass(frozen=True)
class IssuedToken:
    """Signed token and the claims inside it"""
    token: str
    claims: ClaimSet
    token_type: str = TOKEN_TYPE

    @property
    def expires_at(self) -> datetime:
        return self.claims.expires_at


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """
    Builds and signs bearer tokens.

    Typical usage:
        issuer = TokenIssuer(FileKeyProvider.from_directory("./keys"))
        issued = issuer.issue("alice")
        headers = {"Authorization": f"Bearer {issued.token}"}
    """

    def __init__(
        self,
        key_provider: KeyProvider,
        default_ttl: timedelta = timedelta(seconds=DEFAULT_TOKEN_TTL_SECONDS),
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize token issuer

        Args:
            key_provider: Source of the signing key
            default_ttl: Lifetime used when issue() gets no ttl
            clock: Returns the current time (timezone-aware)
        """
        self.logger = logging.getLogger("security.token_issuer")
        self.key_provider = key_provider
        self.algorithm = TOKEN_ALGORITHM
        self.default_ttl = default_ttl
        self._clock = clock

        self.logger.info(
            f"TokenIssuer initialized (algo={self.algorithm}, "
            f"ttl={int(default_ttl.total_seconds())}s)"
        )

    def issue(self, subject: str, ttl: Optional[timedelta] = None) -> IssuedToken:
        """
        Sign a token for subject

        Args:
            subject: Username placed in the "sub" claim
            ttl: Lifetime; defaults to the issuer's default_ttl

        Returns:
            IssuedToken with the compact JWT and its claims

        Raises:
            ValueError: If subject is empty
            SigningError: If the key is unavailable, unparseable or signing fails
        """
        if not subject or not isinstance(subject, str):
            raise ValueError("subject required")

        lifetime = self.default_ttl if ttl is None else ttl
        # "exp" is signed in whole seconds
        expires_at = (self._clock() + lifetime).replace(microsecond=0)
        claims = ClaimSet(subject=subject, expires_at=expires_at)
        private_key = self._load_private_key()

        try:
            token = jwt.encode(claims.to_payload(), private_key, algorithm=self.algorithm)
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            self.logger.error(f"Signing failed for {subject}: {e}")
            raise SigningError("Token signing failed") from e

        self.logger.info(f"Token issued for {subject} (exp={claims.expires_at.isoformat()})")
        return IssuedToken(token=token, claims=claims)

    def _load_private_key(self) -> ec.EllipticCurvePrivateKey:
        try:
            pem = self.key_provider.private_key()
        except KeyUnavailableError as e:
            self.logger.error(f"Signing key unavailable: {e}")
            raise SigningError("Signing key unavailable") from e

        try:
            key = serialization.load_pem_private_key(pem, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            self.logger.error(f"Signing key could not be parsed: {e}")
            raise SigningError("Signing key could not be parsed") from e

        if not isinstance(key, ec.EllipticCurvePrivateKey) or not isinstance(key.curve, ec.SECP256R1):
            self.logger.error(f"Signing key is not an EC P-256 key ({type(key).__name__})")
            raise SigningError(f"{self.algorithm} requires an EC P-256 private key")
        return key
