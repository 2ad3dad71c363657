"""Firebase Cloud Messaging integration settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class FcmSettings(IntegrationSettings):
    """FCM HTTP v1 gateway configuration.

    Environment Variables:
        FCM_PROJECT_ID: Firebase project id messages are sent under
        FCM_CREDENTIALS_JSON: Service account JSON key content
        FCM_API_URL: Base URL of the FCM API (default: https://fcm.googleapis.com)
        FCM_TIMEOUT_SECONDS: Per-request timeout (default: 10)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        project = settings.fcm.FCM_PROJECT_ID
        ```
    """

    FCM_PROJECT_ID: str = Field(default="", alias="FCM_PROJECT_ID")
    FCM_CREDENTIALS_JSON: Optional[str] = Field(
        default=None, alias="FCM_CREDENTIALS_JSON"
    )
    FCM_API_URL: str = Field(
        default="https://fcm.googleapis.com", alias="FCM_API_URL"
    )
    FCM_TIMEOUT_SECONDS: float = Field(default=10.0, alias="FCM_TIMEOUT_SECONDS")
