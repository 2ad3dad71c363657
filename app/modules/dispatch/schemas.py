"""Request and response schemas for the dispatch HTTP surfaces.

Field names follow the mobile clients' camelCase JSON.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NotificationContentRequest(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None


class DirectSendRequest(BaseModel):
    """Body of the authenticated direct call.

    Example:
        {"token": "T1", "notification": {"title": "Hi", "body": "..."}, "data": {"type": "medication_taken"}}
    """

    model_config = ConfigDict(extra="ignore")

    token: Optional[str] = None
    notification: NotificationContentRequest = Field(
        default_factory=NotificationContentRequest
    )
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("notification", "data", mode="before")
    @classmethod
    def default_when_null(cls, v: Any) -> Any:
        return {} if v is None else v


class PublicNotificationRequest(BaseModel):
    """Body of the public notification endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")


class PillNotificationRequest(BaseModel):
    """Body of the public pill reminder endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token: Optional[str] = None
    elder_name: Optional[str] = Field(default=None, alias="elderName")
    pill_name: Optional[str] = Field(default=None, alias="pillName")
    guardian_id: Optional[str] = Field(default=None, alias="guardianId")
    api_key: Optional[str] = Field(default=None, alias="apiKey")


class ChangeFeedRequest(BaseModel):
    """A created notification request document pushed by a change feed."""

    id: str
    document: Optional[Dict[str, Any]] = None


class SendResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message_id: Optional[str] = Field(default=None, serialization_alias="messageId")
