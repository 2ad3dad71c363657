"""Caller identity for the authenticated direct-call surface."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from infrastructure.security import (
    JWKSManager,
    TokenValidationError,
    validate_jwt_token,
)
from infrastructure.logging import get_module_logger

logger = get_module_logger()


@dataclass(frozen=True)
class CallerIdentity:
    """Verified caller of the direct-call surface."""

    user_id: str
    email: Optional[str] = None
    issuer: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "CallerIdentity":
        # sub may be "issuer/user_id"
        subject = str(claims.get("sub", "unknown"))
        return cls(
            user_id=subject.split("/")[-1],
            email=claims.get("email"),
            issuer=claims.get("iss"),
            claims=dict(claims),
        )


def resolve_caller_identity(
    jwks_manager: JWKSManager, token: Optional[str]
) -> Optional[CallerIdentity]:
    """Verify ``token`` and return the caller, or None when there is no valid caller."""
    if not token:
        return None
    try:
        claims = validate_jwt_token(jwks_manager, token)
    except TokenValidationError as e:
        logger.info("caller_identity_rejected", reason=str(e))
        return None
    return CallerIdentity.from_claims(claims)
