"""Fixtures for dispatch module tests."""

from unittest.mock import MagicMock

import pytest

from infrastructure.auth import CallerIdentity
from infrastructure.notifications import StoreError


@pytest.fixture
def caller_identity():
    return CallerIdentity(user_id="user-42", email="guardian@example.com")


@pytest.fixture
def mock_store(record_factory):
    """DeliveryStore mock holding one unprocessed record."""
    store = MagicMock()
    store.get_request.return_value = record_factory()
    store.mark_processed.return_value = True
    store.mark_failed.return_value = True
    return store


@pytest.fixture
def failing_audit_store(mock_store):
    mock_store.append_sent_log.side_effect = StoreError("sent log unavailable")
    mock_store.append_owner_notification.side_effect = RuntimeError("boom")
    return mock_store
