"""Unit tests for the dispatch orchestrator."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from infrastructure.notifications import (
    GatewayError,
    InvalidArgumentError,
    NotificationIntent,
    StoreError,
)
from modules.dispatch.orchestrator import DUPLICATE_SEND, validation_message
from modules.dispatch.outcomes import DispatchState
from tests.factories import FIXED_NOW, FakeGateway


@pytest.mark.unit
class TestDispatchWithRecord:
    def test_sends_and_commits(
        self, orchestrator, fake_gateway, memory_store, record_factory, intent_factory
    ):
        memory_store.create_request(record_factory())

        outcome = orchestrator.dispatch(intent_factory(), record_id="req-1")

        assert outcome.state == DispatchState.COMMITTED
        assert outcome.message_id == "projects/test/messages/1"
        assert outcome.history == [
            DispatchState.RECEIVED,
            DispatchState.VALIDATED,
            DispatchState.PERMITTED,
            DispatchState.SENT,
            DispatchState.COMMITTED,
        ]
        record = memory_store.get_request("req-1")
        assert record.processed is True
        assert record.message_id == "projects/test/messages/1"
        assert record.processed_at == FIXED_NOW

    def test_payload_uses_highest_priority(
        self, orchestrator, fake_gateway, memory_store, record_factory, intent_factory
    ):
        memory_store.create_request(record_factory())

        orchestrator.dispatch(intent_factory(), record_id="req-1")

        payload = fake_gateway.sent[0]
        assert payload.token == "T1"
        assert payload.notification.title == "Time for pills"
        assert payload.android.ttl == 60000
        assert payload.android.notification.channel_id == "high_importance_channel"
        assert payload.apns.headers["apns-priority"] == "10"
        assert payload.webpush.headers == {"Urgency": "high"}

    def test_processed_record_is_skipped(
        self, orchestrator, fake_gateway, memory_store, record_factory, intent_factory
    ):
        memory_store.create_request(record_factory(processed=True, messageId="m-0"))

        outcome = orchestrator.dispatch(intent_factory(), record_id="req-1")

        assert outcome.state == DispatchState.SKIPPED
        assert outcome.reason == "already_processed"
        assert outcome.history[-1] == DispatchState.SKIPPED
        assert fake_gateway.sent == []
        assert memory_store.get_request("req-1").message_id == "m-0"

    def test_missing_record_is_skipped(self, orchestrator, fake_gateway, intent_factory):
        outcome = orchestrator.dispatch(intent_factory(), record_id="req-404")

        assert outcome.state == DispatchState.SKIPPED
        assert outcome.reason == "not_found"
        assert fake_gateway.sent == []

    def test_second_dispatch_sends_nothing(
        self, orchestrator, fake_gateway, memory_store, record_factory, intent_factory
    ):
        memory_store.create_request(record_factory())

        first = orchestrator.dispatch(intent_factory(), record_id="req-1")
        second = orchestrator.dispatch(intent_factory(), record_id="req-1")

        assert first.sent is True
        assert second.state == DispatchState.SKIPPED
        assert len(fake_gateway.sent) == 1

    def test_owner_entry_written(
        self, orchestrator, memory_store, record_factory, intent_factory
    ):
        memory_store.create_request(record_factory())

        orchestrator.dispatch(
            intent_factory(source_id="guardian-1"),
            record_id="req-1",
            write_owner_entry=True,
        )

        entries = memory_store.owner_notifications("guardian-1")
        assert len(entries) == 1
        assert entries[0].message_id == "projects/test/messages/1"
        assert entries[0].sent_at == FIXED_NOW
        assert memory_store.sent_log() == []


@pytest.mark.unit
class TestDispatchValidation:
    def test_empty_token_rejected_before_any_call(self, orchestrator_factory, mock_store):
        gateway = FakeGateway()
        orchestrator = orchestrator_factory(gateway=gateway, store=mock_store)

        with pytest.raises(InvalidArgumentError, match="required"):
            orchestrator.dispatch({"recipientToken": "  ", "title": "Hi"}, record_id="req-1")

        assert gateway.sent == []
        mock_store.get_request.assert_not_called()
        mock_store.mark_failed.assert_not_called()

    def test_unknown_category_rejected(self, orchestrator, fake_gateway):
        with pytest.raises(InvalidArgumentError):
            orchestrator.dispatch({"recipientToken": "T1", "category": "bogus"})

        assert fake_gateway.sent == []

    def test_validation_message_for_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            NotificationIntent.model_validate({})

        assert validation_message(exc_info.value) == "recipientToken is required"

    def test_validation_message_strips_prefix(self):
        with pytest.raises(ValidationError) as exc_info:
            NotificationIntent.model_validate({"recipientToken": ""})

        assert not validation_message(exc_info.value).startswith("Value error")


@pytest.mark.unit
class TestDispatchWithoutRecord:
    def test_direct_send_skips_store(self, orchestrator_factory, mock_store, intent_factory):
        gateway = FakeGateway()
        orchestrator = orchestrator_factory(gateway=gateway, store=mock_store)

        outcome = orchestrator.dispatch(intent_factory())

        assert outcome.state == DispatchState.COMMITTED
        assert outcome.record_id is None
        assert len(gateway.sent) == 1
        mock_store.get_request.assert_not_called()
        mock_store.mark_processed.assert_not_called()

    def test_sent_log_written(self, orchestrator, memory_store, intent_factory):
        orchestrator.dispatch(intent_factory(), write_sent_log=True)

        log = memory_store.sent_log()
        assert len(log) == 1
        assert log[0].recipient_token == "T1"
        assert log[0].category == "medication-reminder"
        assert log[0].title == "Time for pills"

    def test_owner_entry_needs_source_id(self, orchestrator, memory_store, intent_factory):
        orchestrator.dispatch(intent_factory(), write_owner_entry=True)

        assert memory_store.owner_notifications("guardian-1") == []


@pytest.mark.unit
class TestDispatchFailures:
    def test_gateway_failure_marks_record(
        self, orchestrator_factory, memory_store, record_factory, intent_factory
    ):
        memory_store.create_request(record_factory())
        orchestrator = orchestrator_factory(
            gateway=FakeGateway(error=RuntimeError("unavailable"))
        )

        with pytest.raises(GatewayError) as exc_info:
            orchestrator.dispatch(intent_factory(), record_id="req-1")

        assert exc_info.value.cause == "unavailable"
        outcome = exc_info.value.outcome
        assert outcome.state == DispatchState.FAILED
        assert outcome.state.is_terminal
        assert outcome.record_id == "req-1"
        assert outcome.error == "unavailable"
        assert outcome.history == [
            DispatchState.RECEIVED,
            DispatchState.VALIDATED,
            DispatchState.PERMITTED,
            DispatchState.FAILED,
        ]
        assert outcome.to_dict()["state"] == "failed"
        record = memory_store.get_request("req-1")
        assert record.processed is False
        assert record.error == "unavailable"
        assert record.error_at == FIXED_NOW

    def test_retry_after_failure_sends_once(
        self, orchestrator_factory, memory_store, record_factory, intent_factory
    ):
        memory_store.create_request(record_factory())
        failing = orchestrator_factory(gateway=FakeGateway(error=RuntimeError("down")))
        with pytest.raises(GatewayError):
            failing.dispatch(intent_factory(), record_id="req-1")

        gateway = FakeGateway()
        healthy = orchestrator_factory(gateway=gateway)
        first = healthy.dispatch(intent_factory(), record_id="req-1")
        second = healthy.dispatch(intent_factory(), record_id="req-1")

        assert first.state == DispatchState.COMMITTED
        assert second.state == DispatchState.SKIPPED
        assert len(gateway.sent) == 1
        assert memory_store.get_request("req-1").processed is True

    def test_failure_record_error_does_not_mask_gateway_error(
        self, orchestrator_factory, mock_store, intent_factory
    ):
        mock_store.mark_failed.side_effect = StoreError("throttled")
        orchestrator = orchestrator_factory(
            gateway=FakeGateway(error=RuntimeError("down")), store=mock_store
        )

        with pytest.raises(GatewayError):
            orchestrator.dispatch(intent_factory(), record_id="req-1")

    def test_commit_failure_carries_message_id(
        self, orchestrator_factory, mock_store, intent_factory
    ):
        mock_store.mark_processed.side_effect = StoreError("throttled")
        orchestrator = orchestrator_factory(store=mock_store)

        with pytest.raises(StoreError) as exc_info:
            orchestrator.dispatch(intent_factory(), record_id="req-1")

        assert exc_info.value.message_id == "projects/test/messages/1"

    def test_lost_fence_reported_as_duplicate_send(
        self, orchestrator_factory, mock_store, intent_factory
    ):
        mock_store.mark_processed.return_value = False
        orchestrator = orchestrator_factory(store=mock_store)

        with patch("modules.dispatch.orchestrator.logger") as mock_logger:
            outcome = orchestrator.dispatch(intent_factory(), record_id="req-1")

        assert outcome.state == DispatchState.COMMITTED
        assert outcome.reason == DUPLICATE_SEND
        assert outcome.to_dict()["reason"] == "duplicate_send"
        mock_logger.warning.assert_called_once_with(
            "notification_duplicate_sent",
            record_id="req-1",
            duplicate_message_id="projects/test/messages/1",
            category=intent_factory().category.value,
        )
        mock_logger.info.assert_not_called()

    def test_winning_commit_has_no_reason(
        self, orchestrator_factory, mock_store, intent_factory
    ):
        orchestrator = orchestrator_factory(store=mock_store)

        outcome = orchestrator.dispatch(intent_factory(), record_id="req-1")

        assert outcome.reason is None

    def test_audit_failures_swallowed(
        self, orchestrator_factory, failing_audit_store, intent_factory
    ):
        orchestrator = orchestrator_factory(store=failing_audit_store)

        outcome = orchestrator.dispatch(
            intent_factory(source_id="guardian-1"),
            record_id="req-1",
            write_sent_log=True,
            write_owner_entry=True,
        )

        assert outcome.state == DispatchState.COMMITTED
        failing_audit_store.append_sent_log.assert_called_once()
        failing_audit_store.append_owner_notification.assert_called_once()
