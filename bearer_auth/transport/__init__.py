"""
Transport module - HTTP surface

Provides:
- HTTPTransport: aiohttp server for registration, login and protected routes
"""

from .http_transport import HTTPTransport

__all__ = [
    "HTTPTransport",
]
