"""Unit tests for InMemoryDeliveryStore."""

import threading

import pytest

from infrastructure.events.models import NOTIFICATION_REQUEST_CREATED
from infrastructure.notifications.errors import StoreError
from infrastructure.notifications.models import NotificationIntent, SentNotificationLog
from infrastructure.notifications.payloads import PayloadBuilder
from infrastructure.persistence.memory import InMemoryDeliveryStore


@pytest.mark.unit
class TestInMemoryDeliveryStore:
    def test_create_and_get(self, memory_store, record_factory):
        memory_store.create_request(record_factory())

        record = memory_store.get_request("req-1")

        assert record.token == "T1"
        assert record.processed is False

    def test_get_returns_copy(self, memory_store, record_factory):
        memory_store.create_request(record_factory())

        memory_store.get_request("req-1").processed = True

        assert memory_store.get_request("req-1").processed is False

    def test_duplicate_create_raises(self, memory_store, record_factory):
        memory_store.create_request(record_factory())

        with pytest.raises(StoreError, match="already exists"):
            memory_store.create_request(record_factory())

    def test_get_missing_returns_none(self, memory_store):
        assert memory_store.get_request("missing") is None

    def test_mark_processed_only_once(self, memory_store, record_factory, fixed_clock):
        memory_store.create_request(record_factory())

        assert memory_store.mark_processed("req-1", "m-1", fixed_clock.now()) is True
        assert memory_store.mark_processed("req-1", "m-2", fixed_clock.now()) is False

        record = memory_store.get_request("req-1")
        assert record.processed is True
        assert record.message_id == "m-1"
        assert record.processed_at == fixed_clock.now()

    def test_mark_processed_missing_record(self, memory_store, fixed_clock):
        assert memory_store.mark_processed("missing", "m-1", fixed_clock.now()) is False

    def test_mark_failed_never_overwrites_success(
        self, memory_store, record_factory, fixed_clock
    ):
        memory_store.create_request(record_factory())
        memory_store.mark_processed("req-1", "m-1", fixed_clock.now())

        assert memory_store.mark_failed("req-1", "late", fixed_clock.now()) is False
        assert memory_store.get_request("req-1").error is None

    def test_mark_failed_leaves_record_eligible(
        self, memory_store, record_factory, fixed_clock
    ):
        memory_store.create_request(record_factory())

        assert memory_store.mark_failed("req-1", "UNREGISTERED", fixed_clock.now())

        record = memory_store.get_request("req-1")
        assert record.processed is False
        assert record.error == "UNREGISTERED"
        assert record.error_at == fixed_clock.now()

    def test_concurrent_commits_single_winner(self, record_factory, fixed_clock):
        store = InMemoryDeliveryStore()
        store.create_request(record_factory())
        results = []
        barrier = threading.Barrier(8)

        def commit(i):
            barrier.wait()
            results.append(store.mark_processed("req-1", f"m-{i}", fixed_clock.now()))

        threads = [threading.Thread(target=commit, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1

    def test_subscribers_receive_creation_event(self, memory_store, record_factory):
        received = []
        memory_store.subscribe(received.append)

        memory_store.create_request(record_factory())

        assert len(received) == 1
        event = received[0]
        assert event.event_type == NOTIFICATION_REQUEST_CREATED
        assert event.record_id == "req-1"
        assert event.document["token"] == "T1"
        assert event.document["guardianId"] == "guardian-1"
        assert event.metadata == {"source": "memory"}

    def test_audit_entries(self, memory_store, fixed_clock):
        intent = NotificationIntent(recipientToken="T1", sourceId="g-1")
        payload = PayloadBuilder(clock=fixed_clock).build(intent)
        entry = SentNotificationLog.from_delivery(intent, payload, "m-1", fixed_clock.now())

        memory_store.append_sent_log(entry)
        memory_store.append_owner_notification("g-1", entry)

        assert [e.entry_id for e in memory_store.sent_log()] == [entry.entry_id]
        assert [e.message_id for e in memory_store.owner_notifications("g-1")] == ["m-1"]
        assert memory_store.owner_notifications("other") == []
