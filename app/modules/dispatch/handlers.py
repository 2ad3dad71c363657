"""Change-notification intake.

``handle`` turns one NotificationRequestCreated event into a dispatch. The
surrounding infrastructure delivers events at least once, through the
in-process event registry, a DynamoDB stream batch or the change-feed HTTP
endpoint; duplicates are absorbed by the idempotency guard.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from infrastructure.events import (
    NOTIFICATION_REQUEST_CREATED,
    NotificationRequestCreated,
    register_event_handler,
)
from infrastructure.logging import get_module_logger
from infrastructure.notifications import DeliveryRecord, InvalidArgumentError
from infrastructure.persistence.dynamodb import from_item
from modules.dispatch.orchestrator import DispatchOrchestrator, validation_message
from modules.dispatch.outcomes import DispatchOutcome, DispatchState

logger = get_module_logger()


def _skipped(record_id: Optional[str], reason: str) -> DispatchOutcome:
    logger.info("notification_request_skipped", record_id=record_id, reason=reason)
    return DispatchOutcome(
        state=DispatchState.SKIPPED,
        record_id=record_id,
        reason=reason,
        history=[DispatchState.RECEIVED, DispatchState.SKIPPED],
    )


def _rejected(record_id: Optional[str], error: str) -> DispatchOutcome:
    logger.warning("notification_request_rejected", record_id=record_id, error=error)
    return DispatchOutcome(
        state=DispatchState.REJECTED,
        record_id=record_id,
        reason="invalid_argument",
        error=error,
        history=[DispatchState.RECEIVED, DispatchState.REJECTED],
    )


def handle(
    event: NotificationRequestCreated, orchestrator: DispatchOrchestrator
) -> DispatchOutcome:
    """Dispatch the notification owed for a created request document.

    Not every document owes a send: a missing document, one already marked
    processed, or one without a token is skipped without error. A document
    that can never be sent (bad category, malformed fields) is rejected
    without error so redelivery does not loop on it.

    Raises:
        GatewayError: the send failed and the record was marked failed
        StoreError: a durable read/write failed
    """
    record_id = event.record_id
    document = event.document
    if not record_id:
        return _skipped(record_id, "record_id_missing")
    if not document:
        return _skipped(record_id, "document_missing")

    try:
        record = DeliveryRecord.model_validate({**document, "id": record_id})
    except ValidationError as e:
        return _rejected(record_id, validation_message(e))

    if record.processed:
        return _skipped(record_id, "already_processed")
    if not record.token or not record.token.strip():
        return _skipped(record_id, "token_missing")

    try:
        return orchestrator.dispatch(
            record.intent_fields(),
            record_id=record.record_id,
            write_owner_entry=True,
        )
    except InvalidArgumentError as e:
        return _rejected(record_id, e.message)


@register_event_handler(NOTIFICATION_REQUEST_CREATED)
def on_notification_request_created(event: NotificationRequestCreated):
    """Registry entry point, wired to the application's orchestrator."""
    from infrastructure.services.providers import get_orchestrator

    return handle(event, get_orchestrator())


def stream_record_to_event(record: Dict[str, Any]) -> Optional[NotificationRequestCreated]:
    """Convert one DynamoDB Streams record into an event, None for non-inserts."""
    if record.get("eventName") != "INSERT":
        return None
    change = record.get("dynamodb") or {}
    image = change.get("NewImage")
    document = from_item(image) if image else None
    keys = from_item(change.get("Keys") or {})
    record_id = str((document or {}).get("id") or keys.get("id") or "")
    return NotificationRequestCreated.for_document(
        record_id,
        document,
        source="dynamodb_stream",
        event_id=record.get("eventID"),
    )


def process_stream_records(
    records: List[Dict[str, Any]],
    orchestrator: Optional[DispatchOrchestrator] = None,
) -> Dict[str, List[Dict[str, str]]]:
    """Handle a DynamoDB Streams batch.

    Returns the partial batch response: only records whose handling raised
    are reported, so only those are redelivered.
    """
    if orchestrator is None:
        from infrastructure.services.providers import get_orchestrator

        orchestrator = get_orchestrator()

    failures: List[Dict[str, str]] = []
    for record in records:
        event_id = record.get("eventID", "")
        try:
            event = stream_record_to_event(record)
            if event is None:
                continue
            handle(event, orchestrator)
        except Exception as e:
            logger.error(
                "stream_record_failed",
                event_id=event_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            failures.append({"itemIdentifier": event_id})

    logger.info(
        "stream_batch_processed",
        record_count=len(records),
        failure_count=len(failures),
    )
    return {"batchItemFailures": failures}


def stream_handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """AWS Lambda entry point for the notification_requests table stream."""
    return process_stream_records(event.get("Records", []))
