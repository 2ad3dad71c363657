"""Idempotency guard over DeliveryRecord documents.

The guard reads the record before a send and fences the outcome after it.
The fence is the store's conditional ``mark_processed``: whichever commit
lands first wins, and every later ``try_begin`` sees ``processed`` and
refuses.
"""

from enum import Enum
from typing import Optional

import structlog

from infrastructure.notifications.clock import Clock, SystemClock
from infrastructure.persistence.base import DeliveryStore

logger = structlog.get_logger()


class GuardDecision(Enum):
    PERMITTED = "permitted"
    ALREADY_PROCESSED = "already_processed"
    NOT_FOUND = "not_found"


class IdempotencyGuard:
    """Store-backed guard for intake paths with a backing record.

    Args:
        store: Durable store holding the DeliveryRecord documents
        clock: Clock used for processedAt / errorAt

    Example:
        guard = IdempotencyGuard(store)
        if guard.try_begin(record_id) is GuardDecision.PERMITTED:
            message_id = client.send(payload)
            guard.commit_success(record_id, message_id)
    """

    def __init__(self, store: DeliveryStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or SystemClock()

    def try_begin(self, record_id: str) -> GuardDecision:
        """Decide whether a send may proceed for ``record_id``.

        The read is strongly consistent, so a redelivered event carrying a
        stale copy of the document is still refused once the record has
        been committed.
        """
        record = self.store.get_request(record_id)
        if record is None:
            logger.info("delivery_record_not_found", record_id=record_id)
            return GuardDecision.NOT_FOUND
        if record.processed:
            logger.info(
                "delivery_record_already_processed",
                record_id=record_id,
                message_id=record.message_id,
            )
            return GuardDecision.ALREADY_PROCESSED
        return GuardDecision.PERMITTED

    def commit_success(self, record_id: str, message_id: str) -> bool:
        """Mark the record processed.

        Returns:
            True if this commit acquired the fence, False if another
            invocation committed the record first
        """
        committed = self.store.mark_processed(record_id, message_id, self.clock.now())
        if not committed:
            logger.warning(
                "delivery_fence_lost",
                record_id=record_id,
                message_id=message_id,
            )
        return committed

    def commit_failure(self, record_id: str, error: str) -> bool:
        """Record a failed attempt; the record stays eligible for a retry."""
        recorded = self.store.mark_failed(record_id, error, self.clock.now())
        if not recorded:
            logger.info("delivery_failure_not_recorded", record_id=record_id)
        return recorded


class NullIdempotencyGuard:
    """Guard for intake paths without a backing record.

    Every invocation is permitted and commits are no-ops.
    """

    def try_begin(self, record_id: str) -> GuardDecision:
        return GuardDecision.PERMITTED

    def commit_success(self, record_id: str, message_id: str) -> bool:
        return True

    def commit_failure(self, record_id: str, error: str) -> bool:
        return True
