"""
Core module - configuration and service orchestration
"""

from .auth_service import (
    AuthenticationService,
    AuthServiceError,
    AuthenticationFailedError,
    CredentialExistsError,
    FailureReason,
)
from .config import AuthConfig, HTTPConfig, ConfigError

__all__ = [
    "AuthenticationService",
    "AuthServiceError",
    "AuthenticationFailedError",
    "CredentialExistsError",
    "FailureReason",
    "AuthConfig",
    "HTTPConfig",
    "ConfigError",
]
