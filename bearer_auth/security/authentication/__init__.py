"""
Authentication module - passwords, keys and bearer tokens

Provides:
- BcryptPasswordHasher: bcrypt password hashing
- KeyProvider, FileKeyProvider, StaticKeyProvider: EC key material
- TokenIssuer: ES256 token signing
- TokenVerifier: token validation with typed rejection reasons
- ClaimSet: subject + expiry carried by a token
"""

from .claims import ClaimSet, ClaimSetError, TokenError
from .password_hasher import BcryptPasswordHasher, PasswordHasherError, HashingError
from .key_provider import (
    KeyProvider,
    FileKeyProvider,
    StaticKeyProvider,
    KeyProviderError,
    KeyUnavailableError,
    generate_ec_key_pair,
    write_key_pair,
)
from .token_issuer import TokenIssuer, IssuedToken, SigningError
from .token_verifier import (
    TokenVerifier,
    RejectionReason,
    TokenRejectedError,
    MalformedTokenError,
    AlgorithmMismatchError,
    VerificationKeyUnavailableError,
    BadSignatureError,
    TokenExpiredError,
)

__all__ = [
    "ClaimSet",
    "ClaimSetError",
    "TokenError",
    "BcryptPasswordHasher",
    "PasswordHasherError",
    "HashingError",
    "KeyProvider",
    "FileKeyProvider",
    "StaticKeyProvider",
    "KeyProviderError",
    "KeyUnavailableError",
    "generate_ec_key_pair",
    "write_key_pair",
    "TokenIssuer",
    "IssuedToken",
    "SigningError",
    "TokenVerifier",
    "RejectionReason",
    "TokenRejectedError",
    "MalformedTokenError",
    "AlgorithmMismatchError",
    "VerificationKeyUnavailableError",
    "BadSignatureError",
    "TokenExpiredError",
]
