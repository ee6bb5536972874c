"""
Security module - authentication primitives and request authorization
"""

from .authorization_guard import AuthorizationGuard, AuthorizationError, UnauthorizedError

__all__ = [
    "AuthorizationGuard",
    "AuthorizationError",
    "UnauthorizedError",
]
