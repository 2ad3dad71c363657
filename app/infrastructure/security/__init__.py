"""Infrastructure security services.

JWKS management and JWT verification for the authenticated API surface.

Exports:
    JWKSManager: Manages JWKS clients for different issuers
    TokenValidationError: Raised when a bearer token cannot be verified
    get_issuer_from_token: Extract issuer from JWT token
    validate_jwt_token: Verify a JWT token and return its claims
"""

from infrastructure.security.jwks import JWKSManager
from infrastructure.security.jwt import (
    TokenValidationError,
    get_issuer_from_token,
    validate_jwt_token,
)

__all__ = [
    "JWKSManager",
    "TokenValidationError",
    "get_issuer_from_token",
    "validate_jwt_token",
]
