"""Fixtures for persistence tests."""

from unittest.mock import MagicMock

import pytest

from infrastructure.operations import OperationResult
from infrastructure.persistence.dynamodb import DynamoDBDeliveryStore


@pytest.fixture
def mock_dynamodb_client():
    """DynamoDBClient mock whose calls succeed by default."""
    client = MagicMock()
    client.put_item.return_value = OperationResult.success(data={})
    client.update_item.return_value = OperationResult.success(data={})
    client.get_item.return_value = OperationResult.success(data={})
    return client


@pytest.fixture
def dynamodb_store(mock_dynamodb_client):
    return DynamoDBDeliveryStore(
        mock_dynamodb_client,
        requests_table="requests",
        sent_log_table="sent",
        owner_table="owners",
    )
