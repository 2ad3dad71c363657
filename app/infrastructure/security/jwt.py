"""Bearer token verification.

Tokens are verified against the JWKS of their issuer; only issuers listed
in ``ISSUER_CONFIG`` are trusted.
"""

from typing import Any, Dict, Optional

import structlog
from jwt import PyJWKClientError, PyJWTError, decode

from infrastructure.security.jwks import JWKSManager

logger = structlog.get_logger()


class TokenValidationError(Exception):
    """The bearer token could not be verified."""


def get_issuer_from_token(token: str) -> Optional[str]:
    """Extract the ``iss`` claim without verifying the signature."""
    try:
        unverified_payload = decode(token, options={"verify_signature": False})
    except PyJWTError as e:
        logger.debug("issuer_extraction_failed", error=str(e))
        return None
    return unverified_payload.get("iss")


def validate_jwt_token(jwks_manager: JWKSManager, token: str) -> Dict[str, Any]:
    """Verify ``token`` and return its claims.

    Args:
        jwks_manager: JWKS manager holding the trusted issuers
        token: Raw bearer token

    Returns:
        The decoded and verified JWT payload

    Raises:
        TokenValidationError: if the token is malformed, from an untrusted
            issuer, expired, or fails signature/audience verification
    """
    if not token:
        raise TokenValidationError("Missing token")

    issuer = get_issuer_from_token(token)
    if not issuer:
        raise TokenValidationError("Issuer not found in token")

    jwks_client = jwks_manager.get_jwks_client(issuer)
    cfg = jwks_manager.get_issuer_config(issuer)
    if not jwks_client or not cfg:
        logger.warning("untrusted_or_missing_issuer", issuer=issuer)
        raise TokenValidationError("Untrusted or missing token issuer")

    try:
        signing_key = jwks_client.get_signing_key_from_jwt(token)
        payload = decode(
            token,
            signing_key.key,
            algorithms=cfg.get("algorithms", ["RS256"]),
            audience=cfg.get("audience"),
            options={"verify_exp": True},
        )
    except (PyJWTError, PyJWKClientError) as e:
        logger.warning("jwt_validation_failed", issuer=issuer, error=str(e))
        raise TokenValidationError(f"Invalid token: {e}") from e

    logger.info("jwt_validation_successful", issuer=issuer)
    return payload
