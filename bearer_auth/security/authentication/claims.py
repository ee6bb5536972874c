"""
Claim set carried inside a bearer token.

Only two claims are required: "sub" (the username) and "exp" (Unix
seconds). Payloads are parsed into a typed ClaimSet; anything that does
not fit is rejected rather than passed around as a loose dict.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

from ...core.constants import CLAIM_SUBJECT, CLAIM_EXPIRES_AT


class TokenError(Exception):
    """Base token error"""
    pass


class ClaimSetError(ValueError):
    """Payload does not describe a valid claim set"""
    pass


@dataclass(frozen=True)
class ClaimSet:
    """Subject and expiry of a token"""
    subject: str
    expires_at: datetime

    def to_payload(self) -> Dict[str, Any]:
        """JWT payload; exp is truncated to whole seconds"""
        return {
            CLAIM_SUBJECT: self.subject,
            CLAIM_EXPIRES_AT: int(self.expires_at.timestamp()),
        }

    @classmethod
    def from_payload(cls, payload: Any) -> "ClaimSet":
        """
        Build a ClaimSet from a decoded JWT payload

        Raises:
            ClaimSetError: If sub or exp is missing or has the wrong type
        """
        if not isinstance(payload, dict):
            raise ClaimSetError("Payload is not a JSON object")

        for claim in (CLAIM_SUBJECT, CLAIM_EXPIRES_AT):
            if claim not in payload:
                raise ClaimSetError(f"Missing claim: {claim}")

        subject = payload[CLAIM_SUBJECT]
        if not isinstance(subject, str) or not subject:
            raise ClaimSetError("Claim 'sub' must be a non-empty string")

        exp = payload[CLAIM_EXPIRES_AT]
        # bool is an int subclass
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise ClaimSetError("Claim 'exp' must be a number")

        try:
            expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise ClaimSetError(f"Claim 'exp' out of range: {e}") from e

        return cls(subject=subject, expires_at=expires_at)
