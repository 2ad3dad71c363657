"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated, Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.auth import CallerIdentity, resolve_caller_identity
from infrastructure.configuration import Settings
from infrastructure.security.jwks import JWKSManager
from infrastructure.services.providers import (
    get_jwks_manager,
    get_orchestrator,
    get_settings,
)
from modules.dispatch.orchestrator import DispatchOrchestrator

# Missing credentials resolve to no identity; the adapter decides
bearer_scheme = HTTPBearer(auto_error=False)

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# JWKS manager dependency
JWKSManagerDep = Annotated[JWKSManager, Depends(get_jwks_manager)]

# Dispatch orchestrator dependency
OrchestratorDep = Annotated[DispatchOrchestrator, Depends(get_orchestrator)]


def get_caller_identity(
    jwks_manager: JWKSManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> Optional[CallerIdentity]:
    """Resolve the bearer token into a caller, None when absent or invalid."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return resolve_caller_identity(jwks_manager, credentials.credentials)


# Caller identity dependency (None when unauthenticated)
CallerIdentityDep = Annotated[Optional[CallerIdentity], Depends(get_caller_identity)]

__all__ = [
    "SettingsDep",
    "JWKSManagerDep",
    "OrchestratorDep",
    "CallerIdentityDep",
    "get_caller_identity",
]
