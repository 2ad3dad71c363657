"""Notification dispatch feature settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


class DispatchSettings(FeatureSettings):
    """Push notification dispatch configuration.

    Environment Variables:
        API_KEY: Shared secret gating the public HTTP endpoints. Empty means
            every public request is refused.
        ANDROID_TTL_MS: Android delivery time-to-live in milliseconds (default: 60000)
        DEFAULT_CATEGORY: Category applied when an intent names none (default: generic)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        ttl = settings.dispatch.ANDROID_TTL_MS
        ```
    """

    PUBLIC_API_KEY: str = Field(default="", alias="API_KEY")
    ANDROID_TTL_MS: int = Field(default=60000, alias="ANDROID_TTL_MS")
    DEFAULT_CATEGORY: str = Field(default="generic", alias="DEFAULT_CATEGORY")

    @field_validator("ANDROID_TTL_MS")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        """TTL must be a positive number of milliseconds."""
        if v <= 0:
            raise ValueError("ANDROID_TTL_MS must be positive")
        return v
