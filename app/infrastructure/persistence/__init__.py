"""Durable store for notification requests and delivery audit entries.

Usage:
    from infrastructure.persistence import InMemoryDeliveryStore

    store = InMemoryDeliveryStore()
    store.create_request(DeliveryRecord(id="abc", token="T1"))
    store.mark_processed("abc", "projects/p/messages/1", clock.now())
"""

from infrastructure.persistence.base import DeliveryStore
from infrastructure.persistence.dynamodb import DynamoDBDeliveryStore
from infrastructure.persistence.memory import InMemoryDeliveryStore

__all__ = [
    "DeliveryStore",
    "DynamoDBDeliveryStore",
    "InMemoryDeliveryStore",
]
