"""DynamoDB persistence for notification requests and audit entries.

Table schema:
- notification_requests: Partition Key ``id`` (S). Holds the request
  fields and the delivery outcome (processed, processedAt, messageId,
  error, errorAt). A DynamoDB stream with NEW_IMAGE on this table feeds
  the change-notification intake.
- sent_notifications: Partition Key ``id`` (S). Append-only.
- owner_notifications: Partition Key ``ownerId`` (S), Sort Key ``id`` (S).
  Append-only.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

import structlog
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from infrastructure.clients.aws.dynamodb import DynamoDBClient
from infrastructure.notifications.errors import StoreError
from infrastructure.notifications.models import DeliveryRecord, SentNotificationLog
from infrastructure.operations import OperationResult
from infrastructure.persistence.base import DeliveryStore

logger = structlog.get_logger()

# The record must exist and must not be processed yet
UNPROCESSED_CONDITION = (
    "attribute_exists(#id) AND "
    "(attribute_not_exists(#processed) OR #processed = :false)"
)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def to_item(document: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize a JSON-compatible document into DynamoDB attribute values."""
    # Round-trip through JSON so floats become Decimal and datetimes strings
    normalized = json.loads(json.dumps(document, default=str), parse_float=Decimal)
    return {key: _serializer.serialize(value) for key, value in normalized.items()}


def from_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Deserialize DynamoDB attribute values into a plain document."""
    return {key: _deserializer.deserialize(value) for key, value in item.items()}


class DynamoDBDeliveryStore(DeliveryStore):
    """DeliveryStore on DynamoDB.

    The idempotency fence is an ``update_item`` guarded by
    UNPROCESSED_CONDITION; DynamoDB evaluates the condition and the update
    atomically, so two concurrent commits for one record cannot both win.

    Args:
        client: DynamoDBClient
        requests_table: Table of notification request documents
        sent_log_table: Global sent log table
        owner_table: Per-owner notification table
    """

    def __init__(
        self,
        client: DynamoDBClient,
        requests_table: str = "notification_requests",
        sent_log_table: str = "sent_notifications",
        owner_table: str = "owner_notifications",
    ):
        self.client = client
        self.requests_table = requests_table
        self.sent_log_table = sent_log_table
        self.owner_table = owner_table
        logger.info(
            "initialized_dynamodb_delivery_store",
            requests_table=requests_table,
            sent_log_table=sent_log_table,
            owner_table=owner_table,
        )

    def create_request(self, record: DeliveryRecord) -> str:
        document = record.model_dump(by_alias=True, mode="json", exclude_none=True)
        result = self.client.put_item(
            self.requests_table,
            Item=to_item(document),
            ConditionExpression="attribute_not_exists(#id)",
            ExpressionAttributeNames={"#id": "id"},
        )
        if result.is_conflict:
            raise StoreError(f"Notification request {record.record_id} already exists")
        self._raise_for(result, "create_request", record.record_id)
        return record.record_id

    def get_request(self, record_id: str) -> Optional[DeliveryRecord]:
        result = self.client.get_item(
            self.requests_table,
            Key={"id": {"S": record_id}},
            ConsistentRead=True,
        )
        self._raise_for(result, "get_request", record_id)

        item = (result.data or {}).get("Item")
        if not item:
            return None
        return DeliveryRecord.model_validate(from_item(item))

    def mark_processed(
        self, record_id: str, message_id: str, processed_at: datetime
    ) -> bool:
        result = self.client.update_item(
            self.requests_table,
            Key={"id": {"S": record_id}},
            UpdateExpression=(
                "SET #processed = :true, #processedAt = :at, #messageId = :mid"
            ),
            ConditionExpression=UNPROCESSED_CONDITION,
            ExpressionAttributeNames={
                "#id": "id",
                "#processed": "processed",
                "#processedAt": "processedAt",
                "#messageId": "messageId",
            },
            ExpressionAttributeValues={
                ":true": {"BOOL": True},
                ":false": {"BOOL": False},
                ":at": {"S": processed_at.isoformat()},
                ":mid": {"S": message_id},
            },
        )
        if result.is_conflict:
            return False
        self._raise_for(result, "mark_processed", record_id)
        return True

    def mark_failed(self, record_id: str, error: str, error_at: datetime) -> bool:
        result = self.client.update_item(
            self.requests_table,
            Key={"id": {"S": record_id}},
            UpdateExpression="SET #processed = :false, #error = :err, #errorAt = :at",
            ConditionExpression=UNPROCESSED_CONDITION,
            ExpressionAttributeNames={
                "#id": "id",
                "#processed": "processed",
                "#error": "error",
                "#errorAt": "errorAt",
            },
            ExpressionAttributeValues={
                ":false": {"BOOL": False},
                ":err": {"S": error},
                ":at": {"S": error_at.isoformat()},
            },
        )
        if result.is_conflict:
            return False
        self._raise_for(result, "mark_failed", record_id)
        return True

    def append_sent_log(self, entry: SentNotificationLog) -> str:
        document = entry.model_dump(by_alias=True, mode="json", exclude_none=True)
        result = self.client.put_item(
            self.sent_log_table,
            Item=to_item(document),
            ConditionExpression="attribute_not_exists(#id)",
            ExpressionAttributeNames={"#id": "id"},
        )
        self._raise_for(result, "append_sent_log", entry.entry_id)
        return entry.entry_id

    def append_owner_notification(
        self, owner_id: str, entry: SentNotificationLog
    ) -> str:
        document = entry.model_dump(by_alias=True, mode="json", exclude_none=True)
        document["ownerId"] = owner_id
        result = self.client.put_item(
            self.owner_table,
            Item=to_item(document),
            ConditionExpression="attribute_not_exists(#id)",
            ExpressionAttributeNames={"#id": "id"},
        )
        self._raise_for(result, "append_owner_notification", entry.entry_id)
        return entry.entry_id

    def _raise_for(self, result: OperationResult, operation: str, key: str) -> None:
        if result.is_success:
            return
        logger.error(
            "delivery_store_operation_failed",
            operation=operation,
            key=key,
            status=result.status.value,
            error_code=result.error_code,
            error=result.message,
        )
        raise StoreError(f"{operation} failed: {result.message}")
