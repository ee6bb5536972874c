"""
bearer_auth - Password registration and ES256 bearer tokens

Clients register a username/password, exchange the password for a
short-lived signed token, and present that token as
"Authorization: Bearer <token>" to reach protected resources.

CHANGELOG:
[2026-10-19 v0.1.0] Initial release
  - bcrypt password hashing
  - ES256 token issuing and verification
  - JSON-file and in-memory credential stores
  - aiohttp endpoints and command-line entry point

ARCHITECTURE:
- Layer 1 : Transport (aiohttp HTTP endpoints)
- Layer 2 : Orchestration (AuthenticationService, AuthorizationGuard)
- Layer 3 : Primitives (PasswordHasher, TokenIssuer, TokenVerifier)
- Layer 4 : Collaborators (CredentialStore, KeyProvider)

SECURITY NOTES:
- A single signing algorithm, checked before any key is touched
- Unknown user and wrong password are indistinguishable to clients
- Infrastructure failures are typed errors, never process exits
"""

__version__ = "0.1.0"

from .core.auth_service import (
    AuthenticationService,
    AuthenticationFailedError,
    CredentialExistsError,
)
from .core.config import AuthConfig
from .persistence.credential_store import (
    Credential,
    CredentialStore,
    InMemoryCredentialStore,
    JSONCredentialStore,
)
from .security.authentication import (
    BcryptPasswordHasher,
    ClaimSet,
    FileKeyProvider,
    StaticKeyProvider,
    TokenIssuer,
    TokenVerifier,
)
from .security.authorization_guard import AuthorizationGuard, UnauthorizedError

__all__ = [
    "AuthenticationService",
    "AuthenticationFailedError",
    "CredentialExistsError",
    "AuthConfig",
    "Credential",
    "CredentialStore",
    "InMemoryCredentialStore",
    "JSONCredentialStore",
    "BcryptPasswordHasher",
    "ClaimSet",
    "FileKeyProvider",
    "StaticKeyProvider",
    "TokenIssuer",
    "TokenVerifier",
    "AuthorizationGuard",
    "UnauthorizedError",
]
