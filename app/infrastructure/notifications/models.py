"""Notification dispatch core models.

Transport-neutral models shared by the payload builder, the delivery
client, the durable store and the intake adapters.

Uses Pydantic BaseModel for:
- Runtime input validation with readable error messages
- camelCase aliases matching the stored document and wire field names
- Consistency with the API layer request schemas
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class NotificationCategory(Enum):
    """Notification categories.

    The category drives presentation rules (Android channel, default
    content) and is the default ``type`` in the data section.
    """

    GENERIC = "generic"
    MEDICATION_REMINDER = "medication-reminder"
    MEDICATION_TAKEN = "medication-taken"

    @classmethod
    def _missing_(cls, value: object):
        # Mobile clients send snake_case ("medication_taken")
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @classmethod
    def parse(cls, value: Any, default: "NotificationCategory") -> "NotificationCategory":
        """Return the matching category, or ``default`` for unknown values."""
        if isinstance(value, cls):
            return value
        if not value:
            return default
        try:
            return cls(value)
        except ValueError:
            return default


class NotificationIntent(BaseModel):
    """The logical request to notify one device.

    Attributes:
        recipient_token: Opaque device/subscription token (required, non-empty)
        title: Visible title; category boilerplate is used when absent
        body: Visible body; category boilerplate is used when absent
        category: Presentation category (default: GENERIC)
        structured_data: Mapping merged into the payload data section
        source_id: Owning subject (guardian/account) for secondary records

    Example:
        intent = NotificationIntent(
            recipientToken="T1",
            title="Time for pills",
            body="Take aspirin",
            category="medication-reminder",
        )
    """

    model_config = ConfigDict(populate_by_name=True)

    recipient_token: str = Field(
        validation_alias=AliasChoices("recipientToken", "recipient_token", "token"),
        serialization_alias="recipientToken",
    )
    title: Optional[str] = None
    body: Optional[str] = None
    category: NotificationCategory = NotificationCategory.GENERIC
    structured_data: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("structuredData", "structured_data", "data"),
        serialization_alias="structuredData",
    )
    source_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sourceId", "source_id", "guardianId"),
        serialization_alias="sourceId",
    )

    @field_validator("recipient_token", mode="before")
    @classmethod
    def validate_recipient_token(cls, v: Any) -> str:
        """Ensure the token is a non-empty string."""
        if v is None or not isinstance(v, str) or not v.strip():
            raise ValueError("recipientToken is required")
        return v.strip()

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> Any:
        return NotificationCategory.GENERIC if v in (None, "") else v

    @field_validator("structured_data", mode="before")
    @classmethod
    def default_structured_data(cls, v: Any) -> Any:
        return {} if v is None else v


class NotificationContent(BaseModel):
    """Visible notification content."""

    title: str
    body: str


class AndroidNotification(BaseModel):
    channel_id: str
    default_sound: bool = True
    default_vibrate_timings: bool = True


class AndroidConfig(BaseModel):
    """Android delivery options. ``ttl`` is in milliseconds."""

    priority: str = "high"
    ttl: int
    notification: AndroidNotification


class ApnsConfig(BaseModel):
    headers: Dict[str, str]
    payload: Dict[str, Any]


class WebpushConfig(BaseModel):
    headers: Dict[str, str]


class ChannelPayload(BaseModel):
    """Platform-specific message handed to the push gateway.

    Built by PayloadBuilder from one NotificationIntent. ``to_fcm_message``
    renders it in the FCM HTTP v1 ``message`` shape.
    """

    token: str
    notification: NotificationContent
    data: Dict[str, str]
    android: AndroidConfig
    apns: ApnsConfig
    webpush: WebpushConfig

    def to_fcm_message(self) -> Dict[str, Any]:
        """Render the payload as an FCM HTTP v1 message."""
        android = self.android.model_dump()
        android["ttl"] = _format_duration(self.android.ttl)
        return {
            "token": self.token,
            "notification": self.notification.model_dump(),
            "data": dict(self.data),
            "android": android,
            "apns": self.apns.model_dump(),
            "webpush": self.webpush.model_dump(),
        }


def _format_duration(millis: int) -> str:
    """Protobuf Duration string ("60s", "1.5s") for a millisecond count."""
    seconds, remainder = divmod(millis, 1000)
    if remainder == 0:
        return f"{seconds}s"
    return f"{seconds}.{remainder:03d}s"


class DeliveryRecord(BaseModel):
    """Durable state of one notification request document.

    The document carries the request fields (token, title, ...) next to the
    delivery outcome fields. Stored field names are camelCase.

    Attributes:
        record_id: Document id (generated event-document id)
        processed: True once a send has been committed; never reset by success
        processed_at: Set on success
        message_id: Gateway-assigned id, set on success
        error: Last failure cause, set on failure
        error_at: Time of the last failure
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    record_id: str = Field(alias="id")
    token: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    category: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    source_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("guardianId", "sourceId", "source_id"),
        serialization_alias="guardianId",
    )
    processed: bool = False
    processed_at: Optional[datetime] = Field(default=None, alias="processedAt")
    message_id: Optional[str] = Field(default=None, alias="messageId")
    error: Optional[str] = None
    error_at: Optional[datetime] = Field(default=None, alias="errorAt")

    @field_validator("data", mode="before")
    @classmethod
    def default_data(cls, v: Any) -> Any:
        return {} if v is None else v

    def intent_fields(self) -> Dict[str, Any]:
        """Request fields in the shape NotificationIntent validates."""
        return {
            "recipientToken": self.token,
            "title": self.title,
            "body": self.body,
            "category": self.category,
            "structuredData": self.data,
            "sourceId": self.source_id,
        }


class SentNotificationLog(BaseModel):
    """Append-only audit entry written after a successful delivery."""

    model_config = ConfigDict(populate_by_name=True)

    entry_id: str = Field(default_factory=lambda: uuid4().hex, alias="id")
    recipient_token: str = Field(alias="token")
    title: str
    body: str
    category: str
    data: Dict[str, str] = Field(default_factory=dict)
    source_id: Optional[str] = Field(default=None, alias="sourceId")
    message_id: str = Field(alias="messageId")
    sent_at: datetime = Field(alias="sentAt")

    @classmethod
    def from_delivery(
        cls,
        intent: NotificationIntent,
        payload: ChannelPayload,
        message_id: str,
        sent_at: datetime,
    ) -> "SentNotificationLog":
        """Build the entry from the intent and the content actually sent."""
        return cls(
            token=intent.recipient_token,
            title=payload.notification.title,
            body=payload.notification.body,
            category=intent.category.value,
            data=payload.data,
            sourceId=intent.source_id,
            messageId=message_id,
            sentAt=sent_at,
        )
