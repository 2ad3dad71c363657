"""In-memory DeliveryStore for local development and tests.

Mirrors the conditional semantics of the DynamoDB store under a single
lock. Subscribers registered with ``subscribe`` receive a
NotificationRequestCreated event for every created request, which stands
in for the DynamoDB stream when running locally.
"""

from datetime import datetime
from threading import Lock
from typing import Callable, Dict, List, Optional

import structlog

from infrastructure.events.models import NotificationRequestCreated
from infrastructure.notifications.errors import StoreError
from infrastructure.notifications.models import DeliveryRecord, SentNotificationLog
from infrastructure.persistence.base import DeliveryStore

logger = structlog.get_logger()

Subscriber = Callable[[NotificationRequestCreated], None]


class InMemoryDeliveryStore(DeliveryStore):
    """Thread-safe in-memory store.

    Records are copied on the way in and on the way out so callers never
    share state with the store.
    """

    def __init__(self):
        self._lock = Lock()
        self._requests: Dict[str, DeliveryRecord] = {}
        self._sent_log: List[SentNotificationLog] = []
        self._owner_entries: Dict[str, List[SentNotificationLog]] = {}
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        """Register a callback for request creation events."""
        self._subscribers.append(callback)

    def create_request(self, record: DeliveryRecord) -> str:
        with self._lock:
            if record.record_id in self._requests:
                raise StoreError(
                    f"Notification request {record.record_id} already exists"
                )
            self._requests[record.record_id] = record.model_copy(deep=True)

        document = record.model_dump(by_alias=True, mode="json", exclude_none=True)
        for callback in list(self._subscribers):
            callback(
                NotificationRequestCreated.for_document(
                    record.record_id, document, source="memory"
                )
            )
        return record.record_id

    def get_request(self, record_id: str) -> Optional[DeliveryRecord]:
        with self._lock:
            record = self._requests.get(record_id)
            return record.model_copy(deep=True) if record else None

    def mark_processed(
        self, record_id: str, message_id: str, processed_at: datetime
    ) -> bool:
        with self._lock:
            record = self._requests.get(record_id)
            if record is None or record.processed:
                return False
            record.processed = True
            record.processed_at = processed_at
            record.message_id = message_id
            return True

    def mark_failed(self, record_id: str, error: str, error_at: datetime) -> bool:
        with self._lock:
            record = self._requests.get(record_id)
            if record is None or record.processed:
                return False
            record.error = error
            record.error_at = error_at
            return True

    def append_sent_log(self, entry: SentNotificationLog) -> str:
        with self._lock:
            self._sent_log.append(entry.model_copy(deep=True))
        return entry.entry_id

    def append_owner_notification(
        self, owner_id: str, entry: SentNotificationLog
    ) -> str:
        with self._lock:
            self._owner_entries.setdefault(owner_id, []).append(
                entry.model_copy(deep=True)
            )
        return entry.entry_id

    def sent_log(self) -> List[SentNotificationLog]:
        with self._lock:
            return [entry.model_copy(deep=True) for entry in self._sent_log]

    def owner_notifications(self, owner_id: str) -> List[SentNotificationLog]:
        with self._lock:
            return [
                entry.model_copy(deep=True)
                for entry in self._owner_entries.get(owner_id, [])
            ]
