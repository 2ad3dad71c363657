"""Durable store capability.

The store owns notification request documents (DeliveryRecord) and the
two append-only audit collections. ``mark_processed`` and ``mark_failed``
are conditional writes: they only apply while the record is unprocessed,
which is what makes a committed success final.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from infrastructure.notifications.models import DeliveryRecord, SentNotificationLog


class DeliveryStore(ABC):
    """Abstract durable store.

    All methods raise StoreError when the backend fails. A refused
    condition is not a failure: the conditional methods return False.
    """

    @abstractmethod
    def create_request(self, record: DeliveryRecord) -> str:
        """Create a notification request document.

        Returns:
            The record id

        Raises:
            StoreError: if the id already exists or the write fails
        """
        pass

    @abstractmethod
    def get_request(self, record_id: str) -> Optional[DeliveryRecord]:
        """Strongly consistent read of a request document, None if absent."""
        pass

    @abstractmethod
    def mark_processed(
        self, record_id: str, message_id: str, processed_at: datetime
    ) -> bool:
        """Set processed/processedAt/messageId if the record is not yet processed.

        Returns:
            True if this call committed the record, False if the record was
            already processed (or no longer exists)
        """
        pass

    @abstractmethod
    def mark_failed(self, record_id: str, error: str, error_at: datetime) -> bool:
        """Record a failed attempt, leaving the record eligible for reprocessing.

        Returns:
            True if recorded, False if the record was processed in the meantime
        """
        pass

    @abstractmethod
    def append_sent_log(self, entry: SentNotificationLog) -> str:
        """Append an entry to the global sent log and return its id."""
        pass

    @abstractmethod
    def append_owner_notification(
        self, owner_id: str, entry: SentNotificationLog
    ) -> str:
        """Append an entry under ``owner_id`` and return its id."""
        pass
