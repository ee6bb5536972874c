"""
Constants for bearer_auth

Module: core.constants
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial constants definition
  - Token signing constants
  - Password hashing defaults
  - Key file names and slots
  - HTTP surface defaults
  - Environment variable names

SECURITY NOTES:
- The signing algorithm is a single fixed value; verifiers accept nothing else
- Token lifetime defaults to one hour
"""

from typing import Final

# ============================================================================
# Service identity
# ============================================================================

SERVICE_NAME: Final[str] = "bearer_auth"
SERVICE_VERSION: Final[str] = "0.1.0"

# ============================================================================
# Tokens
# ============================================================================

# ECDSA over P-256 with SHA-256
TOKEN_ALGORITHM: Final[str] = "ES256"
TOKEN_TYPE: Final[str] = "Bearer"
DEFAULT_TOKEN_TTL_SECONDS: Final[int] = 60 * 60
DEFAULT_LEEWAY_SECONDS: Final[int] = 0

CLAIM_SUBJECT: Final[str] = "sub"
CLAIM_EXPIRES_AT: Final[str] = "exp"

# ============================================================================
# Password hashing
# ============================================================================

DEFAULT_BCRYPT_ROUNDS: Final[int] = 10
MIN_BCRYPT_ROUNDS: Final[int] = 4
MAX_BCRYPT_ROUNDS: Final[int] = 31

# ============================================================================
# Key material
# ============================================================================

SIGNING_KEY_SLOT: Final[str] = "signing"
VERIFICATION_KEY_SLOT: Final[str] = "verification"

PRIVATE_KEY_FILE: Final[str] = "ec256-key-pri.pem"
PUBLIC_KEY_FILE: Final[str] = "ec256-key-pub.pem"

# ============================================================================
# Authorization header
# ============================================================================

AUTHORIZATION_HEADER: Final[str] = "Authorization"
BEARER_SCHEME: Final[str] = "Bearer"

# ============================================================================
# HTTP surface
# ============================================================================

DEFAULT_HTTP_HOST: Final[str] = "127.0.0.1"
DEFAULT_HTTP_PORT: Final[int] = 8080
MAX_REQUEST_BODY_SIZE: Final[int] = 64 * 1024  # 64 KB

ROUTE_REGISTRATION: Final[str] = "/registration"
ROUTE_AUTHENTICATION: Final[str] = "/authentication"
ROUTE_AUTHORIZED_HELLO: Final[str] = "/authorized_hello"
ROUTE_HELLO: Final[str] = "/hello"

# ============================================================================
# Configuration
# ============================================================================

DEFAULT_DATA_DIR: Final[str] = "./data"
DEFAULT_KEYS_DIR: Final[str] = "./keys"

ENV_PREFIX: Final[str] = "BEARER_AUTH_"
ENV_DATA_DIR: Final[str] = ENV_PREFIX + "DATA_DIR"
ENV_PRIVATE_KEY_PATH: Final[str] = ENV_PREFIX + "PRIVATE_KEY_PATH"
ENV_PUBLIC_KEY_PATH: Final[str] = ENV_PREFIX + "PUBLIC_KEY_PATH"
ENV_TOKEN_TTL_SECONDS: Final[str] = ENV_PREFIX + "TOKEN_TTL_SECONDS"
ENV_LEEWAY_SECONDS: Final[str] = ENV_PREFIX + "LEEWAY_SECONDS"
ENV_BCRYPT_ROUNDS: Final[str] = ENV_PREFIX + "BCRYPT_ROUNDS"
ENV_HOST: Final[str] = ENV_PREFIX + "HOST"
ENV_PORT: Final[str] = ENV_PREFIX + "PORT"
