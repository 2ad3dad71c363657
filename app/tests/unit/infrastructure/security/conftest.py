"""Fixtures for JWT validation tests."""

import time
from unittest.mock import MagicMock

import jwt
import pytest

from infrastructure.security.jwks import JWKSManager

ISSUER = "https://issuer.example.com"
AUDIENCE = "push-dispatch"
SIGNING_SECRET = "test-signing-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def issuer_config():
    return {
        ISSUER: {
            "jwks_uri": f"{ISSUER}/.well-known/jwks.json",
            "audience": AUDIENCE,
            "algorithms": ["HS256"],
        }
    }


@pytest.fixture
def jwks_manager(issuer_config):
    """JWKSManager whose JWKS client hands out the HS256 test secret."""
    manager = JWKSManager(issuer_config=issuer_config)
    jwks_client = MagicMock()
    jwks_client.get_signing_key_from_jwt.return_value = MagicMock(key=SIGNING_SECRET)
    manager.jwks_clients[ISSUER] = jwks_client
    return manager


@pytest.fixture
def token_factory():
    """Factory for signed test tokens."""

    def _factory(**overrides):
        claims = {
            "iss": ISSUER,
            "aud": AUDIENCE,
            "sub": f"{ISSUER}/user-42",
            "email": "guardian@example.com",
            "exp": int(time.time()) + 300,
        }
        claims.update(overrides)
        claims = {key: value for key, value in claims.items() if value is not None}
        return jwt.encode(claims, SIGNING_SECRET, algorithm="HS256")

    return _factory
