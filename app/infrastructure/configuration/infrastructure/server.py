"""Server infrastructure settings."""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """Server and application runtime configuration.

    Environment Variables:
        ISSUER_CONFIG: JSON dict of JWT issuer configurations
            ({issuer: {"jwks_uri": ..., "audience": ..., "algorithms": [...]}})
        CORS_ALLOW_ORIGINS: Origins allowed by the CORS middleware

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        issuers = settings.server.ISSUER_CONFIG
        ```
    """

    ISSUER_CONFIG: Optional[Dict[str, Dict[str, Any]]] = Field(
        default=None,
        alias="ISSUER_CONFIG",
    )
    CORS_ALLOW_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )

    @field_validator("ISSUER_CONFIG", mode="before")
    @classmethod
    def validate_issuer_config(cls, v: Optional[Dict[str, Dict[str, Any]]]) -> Any:
        """Validate the ISSUER_CONFIG field."""
        if v is None or not isinstance(v, dict):
            return {}
        return v
