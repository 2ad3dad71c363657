"""Shared fixtures for push dispatch tests."""

from typing import Any, Dict, Optional

import pytest

from infrastructure.events.dispatcher import EVENT_HANDLERS, clear_handlers
from infrastructure.notifications import (
    DeliveryClient,
    DeliveryRecord,
    NotificationIntent,
    PayloadBuilder,
    PushGateway,
)
from infrastructure.persistence import InMemoryDeliveryStore
from modules.dispatch.orchestrator import DispatchOrchestrator
from tests.factories import FakeGateway, FixedClock


@pytest.fixture
def fixed_clock():
    return FixedClock()


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def memory_store():
    return InMemoryDeliveryStore()


@pytest.fixture
def orchestrator_factory(fixed_clock, memory_store):
    """Factory for orchestrators wired with fakes.

    Example:
        orchestrator = orchestrator_factory(gateway=FakeGateway(error=RuntimeError("down")))
    """

    def _factory(gateway: Optional[PushGateway] = None, store=None, clock=None):
        clock = clock or fixed_clock
        return DispatchOrchestrator(
            delivery_client=DeliveryClient(gateway or FakeGateway()),
            store=store or memory_store,
            clock=clock,
            builder=PayloadBuilder(clock=clock),
        )

    return _factory


@pytest.fixture
def orchestrator(orchestrator_factory, fake_gateway):
    return orchestrator_factory(gateway=fake_gateway)


@pytest.fixture
def intent_factory():
    """Factory for NotificationIntent instances."""

    def _factory(
        token: str = "T1",
        title: Optional[str] = "Time for pills",
        body: Optional[str] = "Take aspirin",
        category: str = "medication-reminder",
        data: Optional[Dict[str, Any]] = None,
        source_id: Optional[str] = None,
    ) -> NotificationIntent:
        return NotificationIntent(
            recipientToken=token,
            title=title,
            body=body,
            category=category,
            structuredData=data or {},
            sourceId=source_id,
        )

    return _factory


@pytest.fixture
def record_factory():
    """Factory for DeliveryRecord instances as created by the mobile app."""

    def _factory(record_id: str = "req-1", **fields: Any) -> DeliveryRecord:
        document = {
            "id": record_id,
            "token": "T1",
            "title": "Time for pills",
            "body": "Take aspirin",
            "category": "medication-reminder",
            "guardianId": "guardian-1",
        }
        document.update(fields)
        return DeliveryRecord.model_validate(document)

    return _factory


@pytest.fixture
def clear_event_handlers():
    """Clear event handlers for the test, restoring the registry afterwards."""
    saved = {event_type: list(handlers) for event_type, handlers in EVENT_HANDLERS.items()}
    clear_handlers()
    yield
    clear_handlers()
    EVENT_HANDLERS.update(saved)
