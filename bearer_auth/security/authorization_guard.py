"""
Authorization Guard - Bearer header parsing and token checks

Module: security.authorization_guard
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Strict "Bearer <token>" header parsing
  - Delegation to TokenVerifier
  - Single undifferentiated UnauthorizedError for callers

SECURITY NOTES:
- A header of the wrong shape is refused without touching any key or
  signature code
- Header and token failures look identical to the client; the precise
  reason is kept on the exception and in the server log
"""

import logging
import re
from typing import Optional

from ..core.constants import BEARER_SCHEME
from .authentication.claims import ClaimSet
from .authentication.token_verifier import TokenVerifier, TokenRejectedError, RejectionReason


# Case-sensitive scheme, exactly one space, token without whitespace
BEARER_HEADER_PATTERN = re.compile(rf"{BEARER_SCHEME} (\S+)")


class AuthorizationError(Exception):
    """Base authorization error"""
    pass


class UnauthorizedError(AuthorizationError):
    """Request is not authorized; reason is for server-side use only"""

    def __init__(self, reason: RejectionReason):
        self.reason = reason
        super().__init__("Unauthorized")


class AuthorizationGuard:
    """Authorizes requests from the value of their Authorization header"""

    def __init__(self, verifier: TokenVerifier):
        self.logger = logging.getLogger("security.authorization_guard")
        self.verifier = verifier

    def authorize(self, header_value: Optional[str]) -> ClaimSet:
        """
        Authorize a request

        Args:
            header_value: Raw Authorization header value (None if absent)

        Returns:
            ClaimSet of the presented token

        Raises:
            UnauthorizedError: Bad header shape or rejected token
        """
        token = self.parse_header(header_value)
        if token is None:
            self.logger.warning("Authorization refused: invalid header")
            raise UnauthorizedError(RejectionReason.INVALID_HEADER)

        try:
            claims = self.verifier.verify(token)
        except TokenRejectedError as e:
            if e.reason is RejectionReason.KEY_UNAVAILABLE:
                self.logger.error(f"Authorization refused: {e.reason.value} ({e})")
            else:
                self.logger.warning(f"Authorization refused: {e.reason.value} ({e})")
            raise UnauthorizedError(e.reason) from e

        self.logger.debug(f"Authorized {claims.subject}")
        return claims

    @staticmethod
    def parse_header(header_value: Optional[str]) -> Optional[str]:
        """Token from a "Bearer <token>" header, or None if malformed"""
        if not isinstance(header_value, str):
            return None
        match = BEARER_HEADER_PATTERN.fullmatch(header_value)
        if match is None:
            return None
        return match.group(1)
