"""Durable store infrastructure settings."""

from typing import Literal

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class StoreSettings(InfrastructureSettings):
    """Durable store configuration for delivery records and audit logs.

    Environment Variables:
        STORE_BACKEND: 'dynamodb' (default) or 'memory' (local development)
        NOTIFICATION_REQUESTS_TABLE: Table holding notification request documents
        SENT_NOTIFICATIONS_TABLE: Append-only global sent log
        OWNER_NOTIFICATIONS_TABLE: Append-only per-owner notification entries

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        if settings.store.STORE_BACKEND == "memory":
            ...
        ```
    """

    STORE_BACKEND: Literal["dynamodb", "memory"] = Field(
        default="dynamodb", alias="STORE_BACKEND"
    )
    NOTIFICATION_REQUESTS_TABLE: str = Field(
        default="notification_requests", alias="NOTIFICATION_REQUESTS_TABLE"
    )
    SENT_NOTIFICATIONS_TABLE: str = Field(
        default="sent_notifications", alias="SENT_NOTIFICATIONS_TABLE"
    )
    OWNER_NOTIFICATIONS_TABLE: str = Field(
        default="owner_notifications", alias="OWNER_NOTIFICATIONS_TABLE"
    )
