"""Dispatch orchestrator.

Drives one notification through the dispatch state machine:

    RECEIVED -> VALIDATED -> PERMITTED -> SENT -> COMMITTED
    RECEIVED -> REJECTED            (InvalidArgumentError)
    VALIDATED -> SKIPPED            (record already processed or missing)
    PERMITTED -> FAILED             (GatewayError, outcome attached)

There is no retry here. A failed send is recorded against the backing
record and re-raised so the upstream trigger can redeliver.
"""

from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError

from infrastructure.idempotency import (
    GuardDecision,
    IdempotencyGuard,
    NullIdempotencyGuard,
)
from infrastructure.logging import get_module_logger, redact_token
from infrastructure.notifications import (
    Clock,
    DeliveryClient,
    GatewayError,
    InvalidArgumentError,
    NotificationCategory,
    NotificationIntent,
    PayloadBuilder,
    SentNotificationLog,
    StoreError,
    SystemClock,
)
from infrastructure.persistence import DeliveryStore
from modules.dispatch.outcomes import DispatchOutcome, DispatchState

logger = get_module_logger()

RawIntent = Union[NotificationIntent, Mapping[str, Any]]

# Reason on a COMMITTED outcome whose commit lost the fence to a concurrent send
DUPLICATE_SEND = "duplicate_send"


def validation_message(error: ValidationError) -> str:
    """Readable message for the first validation failure."""
    first = error.errors()[0]
    field_name = ".".join(str(part) for part in first.get("loc", ())) or "input"
    if first.get("type") == "missing":
        return f"{field_name} is required"
    message = first.get("msg", "Invalid argument")
    # pydantic prefixes messages raised from validators
    return message.replace("Value error, ", "", 1)


class DispatchOrchestrator:
    """Central dispatch state machine.

    Args:
        delivery_client: Single-attempt sender wrapping the push gateway
        store: Durable store for records and audit entries
        clock: Time source for commits and audit entries
        builder: Payload builder (default: PayloadBuilder sharing ``clock``)
        default_category: Category used by adapters when a request names none

    Example:
        orchestrator = DispatchOrchestrator(DeliveryClient(gateway), store)
        outcome = orchestrator.dispatch({"recipientToken": "T1", "title": "Hi"})
        outcome.message_id  # "projects/p/messages/1"
    """

    def __init__(
        self,
        delivery_client: DeliveryClient,
        store: DeliveryStore,
        clock: Optional[Clock] = None,
        builder: Optional[PayloadBuilder] = None,
        default_category: NotificationCategory = NotificationCategory.GENERIC,
    ):
        self.delivery_client = delivery_client
        self.store = store
        self.clock = clock or SystemClock()
        self.builder = builder or PayloadBuilder(clock=self.clock)
        self.default_category = default_category
        self.guard = IdempotencyGuard(store, self.clock)
        self._null_guard = NullIdempotencyGuard()

    def validate(self, raw: RawIntent) -> NotificationIntent:
        """RECEIVED -> VALIDATED, or InvalidArgumentError (REJECTED)."""
        if isinstance(raw, NotificationIntent):
            return raw
        try:
            return NotificationIntent.model_validate(dict(raw))
        except ValidationError as e:
            raise InvalidArgumentError(validation_message(e)) from e

    def dispatch(
        self,
        raw: RawIntent,
        record_id: Optional[str] = None,
        write_sent_log: bool = False,
        write_owner_entry: bool = False,
    ) -> DispatchOutcome:
        """Dispatch one notification.

        Args:
            raw: NotificationIntent or a mapping validated into one
            record_id: Backing DeliveryRecord id; None disables the guard
            write_sent_log: Append a SentNotificationLog entry after commit
            write_owner_entry: Append a per-owner entry when the intent has
                a ``source_id``

        Returns:
            DispatchOutcome in state COMMITTED or SKIPPED

        Raises:
            InvalidArgumentError: the intent is invalid; nothing was touched
            GatewayError: the send failed; the record (if any) was marked failed;
                ``outcome`` holds the FAILED DispatchOutcome
            StoreError: a durable read/write failed; ``message_id`` is set
                when the notification had already been sent
        """
        history: List[DispatchState] = [DispatchState.RECEIVED]
        try:
            intent = self.validate(raw)
        except InvalidArgumentError as e:
            logger.info("notification_rejected", record_id=record_id, reason=e.message)
            raise
        history.append(DispatchState.VALIDATED)

        guard = self.guard if record_id else self._null_guard
        decision = guard.try_begin(record_id)
        if decision is not GuardDecision.PERMITTED:
            history.append(DispatchState.SKIPPED)
            logger.info(
                "notification_dispatch_skipped",
                record_id=record_id,
                reason=decision.value,
            )
            return DispatchOutcome(
                state=DispatchState.SKIPPED,
                record_id=record_id,
                reason=decision.value,
                history=history,
            )
        history.append(DispatchState.PERMITTED)

        payload = self.builder.build(intent)
        try:
            message_id = self.delivery_client.send(payload)
        except GatewayError as e:
            logger.warning(
                "notification_dispatch_failed",
                record_id=record_id,
                device_prefix=redact_token(intent.recipient_token),
                category=intent.category.value,
                error=e.cause,
            )
            history.append(DispatchState.FAILED)
            e.outcome = DispatchOutcome(
                state=DispatchState.FAILED,
                record_id=record_id,
                error=e.cause,
                history=history,
            )
            if record_id:
                self._record_failure(record_id, e.cause)
            raise
        history.append(DispatchState.SENT)

        reason = None
        try:
            if not guard.commit_success(record_id, message_id):
                reason = DUPLICATE_SEND
        except StoreError as e:
            logger.error(
                "delivery_commit_failed_after_send",
                record_id=record_id,
                message_id=message_id,
                error=e.message,
            )
            e.message_id = message_id
            raise
        history.append(DispatchState.COMMITTED)

        if reason == DUPLICATE_SEND:
            # Another invocation committed first; this message is a second delivery
            logger.warning(
                "notification_duplicate_sent",
                record_id=record_id,
                duplicate_message_id=message_id,
                category=intent.category.value,
            )
        else:
            logger.info(
                "notification_dispatched",
                record_id=record_id,
                message_id=message_id,
                category=intent.category.value,
            )

        if write_sent_log or (write_owner_entry and intent.source_id):
            entry = SentNotificationLog.from_delivery(
                intent, payload, message_id, self.clock.now()
            )
            if write_sent_log:
                self._append_sent_log(entry, message_id)
            if write_owner_entry and intent.source_id:
                self._append_owner_entry(intent.source_id, entry, message_id)

        return DispatchOutcome(
            state=DispatchState.COMMITTED,
            record_id=record_id,
            message_id=message_id,
            reason=reason,
            history=history,
        )

    def _record_failure(self, record_id: str, cause: str) -> None:
        try:
            self.guard.commit_failure(record_id, cause)
        except StoreError as e:
            # The gateway error is what the caller needs to see
            logger.error(
                "delivery_failure_record_failed",
                record_id=record_id,
                error=e.message,
            )

    def _append_sent_log(self, entry: SentNotificationLog, message_id: str) -> None:
        try:
            self.store.append_sent_log(entry)
        except Exception as e:
            logger.error(
                "sent_log_write_failed",
                message_id=message_id,
                error=str(e),
            )

    def _append_owner_entry(
        self, owner_id: str, entry: SentNotificationLog, message_id: str
    ) -> None:
        try:
            self.store.append_owner_notification(owner_id, entry)
        except Exception as e:
            logger.error(
                "owner_notification_write_failed",
                owner_id=owner_id,
                message_id=message_id,
                error=str(e),
            )
