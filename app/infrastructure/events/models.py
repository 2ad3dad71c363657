"""Event models for the infrastructure event system.

Provides the generic Event base class and the notification request
creation event consumed by the dispatch handler.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

NOTIFICATION_REQUEST_CREATED = "notification_request.created"


@dataclass
class Event:
    """Base class for all events in the system.

    Events are immutable records of something that happened. Delivery to
    handlers is at-least-once, so handlers must tolerate seeing the same
    event twice.
    """

    event_type: str
    """The type of event (e.g., 'notification_request.created')."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    """When the event occurred."""

    correlation_id: UUID = field(default_factory=uuid4)
    """Unique ID to track related log entries across the system."""

    metadata: Dict[str, Any] = field(default_factory=dict)
    """Custom metadata for this event type."""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize event to a dictionary with ISO timestamp and string UUID."""
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        data["correlation_id"] = str(self.correlation_id)
        return data


@dataclass
class NotificationRequestCreated(Event):
    """A notification request document was created.

    ``document`` is the document as it was at creation time; it may be
    stale by the time a redelivered copy of the event is handled.
    """

    record_id: str = ""
    document: Optional[Dict[str, Any]] = None

    @classmethod
    def for_document(
        cls,
        record_id: str,
        document: Optional[Dict[str, Any]],
        **metadata: Any,
    ) -> "NotificationRequestCreated":
        return cls(
            event_type=NOTIFICATION_REQUEST_CREATED,
            record_id=record_id,
            document=document,
            metadata=metadata,
        )
