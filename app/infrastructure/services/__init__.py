"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    CallerIdentityDep,
    JWKSManagerDep,
    OrchestratorDep,
    SettingsDep,
    get_caller_identity,
)
from infrastructure.services.providers import (
    get_jwks_manager,
    get_orchestrator,
    get_push_gateway,
    get_settings,
    get_store,
)

__all__ = [
    "SettingsDep",
    "JWKSManagerDep",
    "OrchestratorDep",
    "CallerIdentityDep",
    "get_caller_identity",
    "get_settings",
    "get_jwks_manager",
    "get_store",
    "get_push_gateway",
    "get_orchestrator",
]
