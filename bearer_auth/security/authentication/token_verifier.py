"""
Token Verifier - ES256 bearer token validation

Module: security.authentication.token_verifier
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Structure, algorithm, signature and expiry checks
  - Typed ClaimSet extraction
  - One exception class per rejection reason

ARCHITECTURE:
One verify() call walks a fixed sequence of checks:

    parse header -> check algorithm -> load public key
        -> verify signature -> check expiry -> accepted

Each step either passes or raises a TokenRejectedError subclass whose
`reason` names the failed step. Nothing is cached between calls; the
result depends only on the token, the key the provider returns now, and
the current time.

SECURITY NOTES:
- The declared algorithm is compared against the verifier's single
  algorithm BEFORE the key is loaded or any signature code runs
- PyJWT is given an allow-list containing only that algorithm
- exp is checked against our own clock, after the signature
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ...core.constants import TOKEN_ALGORITHM, DEFAULT_LEEWAY_SECONDS
from .claims import ClaimSet, ClaimSetError, TokenError
from .key_provider import KeyProvider, KeyUnavailableError


class RejectionReason(Enum):
    """Why a token (or the header carrying it) was refused"""
    MALFORMED = "malformed"
    ALGORITHM_MISMATCH = "algorithm_mismatch"
    KEY_UNAVAILABLE = "key_unavailable"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    # Raised by the authorization guard before a token reaches the verifier
    INVALID_HEADER = "invalid_header"


class TokenRejectedError(TokenError):
    """Token failed verification"""
    reason: RejectionReason = RejectionReason.MALFORMED


class MalformedTokenError(TokenRejectedError):
    """Token structure, header, payload or claims are invalid"""
    reason = RejectionReason.MALFORMED


class AlgorithmMismatchError(TokenRejectedError):
    """Token declares an algorithm other than the accepted one"""
    reason = RejectionReason.ALGORITHM_MISMATCH


class VerificationKeyUnavailableError(TokenRejectedError):
    """Public key could not be obtained or parsed"""
    reason = RejectionReason.KEY_UNAVAILABLE


class BadSignatureError(TokenRejectedError):
    """Signature does not match header and payload"""
    reason = RejectionReason.BAD_SIGNATURE


class TokenExpiredError(TokenRejectedError):
    """Token lifetime is over"""
    reason = RejectionReason.EXPIRED


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenVerifier:
    """
    Validates bearer tokens signed by TokenIssuer.

    The accepted algorithm is fixed when the verifier is built; callers
    cannot pass an algorithm to verify().
    """

    def __init__(
        self,
        key_provider: KeyProvider,
        leeway: timedelta = timedelta(seconds=DEFAULT_LEEWAY_SECONDS),
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize token verifier

        Args:
            key_provider: Source of the verification key
            leeway: Grace period allowed past exp (clock skew)
            clock: Returns the current time (timezone-aware)
        """
        self.logger = logging.getLogger("security.token_verifier")
        self.key_provider = key_provider
        self.algorithm = TOKEN_ALGORITHM
        self.leeway = leeway
        self._clock = clock

    def verify(self, token: str) -> ClaimSet:
        """
        Verify a token and extract its claims

        Args:
            token: Compact JWT string

        Returns:
            ClaimSet of an accepted token

        Raises:
            MalformedTokenError: Bad structure, header, payload or claims
            AlgorithmMismatchError: Header alg is not the accepted algorithm
            VerificationKeyUnavailableError: Public key missing or unusable
            BadSignatureError: Signature mismatch
            TokenExpiredError: exp is in the past
        """
        self._check_algorithm(self._parse_header(token))
        public_key = self._load_public_key()
        claims = self._verify_signature(token, public_key)
        self._check_expiry(claims)
        return claims

    def _parse_header(self, token: str) -> dict:
        if not isinstance(token, str) or not token:
            raise MalformedTokenError("Token must be a non-empty string")
        if token.count(".") != 2:
            raise MalformedTokenError("Token must have three segments")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise MalformedTokenError(f"Invalid token header: {e}") from e

        if not isinstance(header, dict):
            raise MalformedTokenError("Token header is not a JSON object")
        return header

    def _check_algorithm(self, header: dict) -> None:
        declared = header.get("alg")
        if declared != self.algorithm:
            raise AlgorithmMismatchError(
                f"Token algorithm {declared!r} is not accepted (expected {self.algorithm})"
            )

    def _load_public_key(self) -> ec.EllipticCurvePublicKey:
        try:
            pem = self.key_provider.public_key()
        except KeyUnavailableError as e:
            self.logger.error(f"Verification key unavailable: {e}")
            raise VerificationKeyUnavailableError("Verification key unavailable") from e

        try:
            key = serialization.load_pem_public_key(pem)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            self.logger.error(f"Verification key could not be parsed: {e}")
            raise VerificationKeyUnavailableError("Verification key could not be parsed") from e

        if not isinstance(key, ec.EllipticCurvePublicKey) or not isinstance(key.curve, ec.SECP256R1):
            self.logger.error(f"Verification key is not an EC P-256 key ({type(key).__name__})")
            raise VerificationKeyUnavailableError(f"{self.algorithm} requires an EC P-256 public key")
        return key

    def _verify_signature(self, token: str, public_key: ec.EllipticCurvePublicKey) -> ClaimSet:
        try:
            payload = jwt.decode(
                token,
                public_key,
                algorithms=[self.algorithm],
                # Claims are validated by ClaimSet and _check_expiry
                options={
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                    "verify_aud": False,
                    "verify_iss": False,
                },
            )
        except jwt.InvalidSignatureError as e:
            raise BadSignatureError("Token signature is invalid") from e
        except jwt.InvalidAlgorithmError as e:
            raise AlgorithmMismatchError(f"Token algorithm is not accepted: {e}") from e
        except jwt.PyJWTError as e:
            raise MalformedTokenError(f"Token could not be decoded: {e}") from e

        try:
            return ClaimSet.from_payload(payload)
        except ClaimSetError as e:
            raise MalformedTokenError(str(e)) from e

    def _check_expiry(self, claims: ClaimSet) -> None:
        now = self._clock()
        if now > claims.expires_at + self.leeway:
            raise TokenExpiredError(
                f"Token for {claims.subject} expired at {claims.expires_at.isoformat()}"
            )
