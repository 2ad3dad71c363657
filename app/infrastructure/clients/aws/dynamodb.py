"""DynamoDB client for AWS operations.

Provides access to the DynamoDB operations the durable store needs
(get_item, put_item, update_item) with OperationResult return types.
"""

from typing import Any, Dict, Optional

from botocore.client import BaseClient  # type: ignore
import structlog

from infrastructure.clients.aws.client import execute_aws_api_call
from infrastructure.clients.aws.session_provider import SessionProvider
from infrastructure.operations.result import OperationResult

logger = structlog.get_logger()


class DynamoDBClient:
    """Client for DynamoDB operations.

    The underlying boto3 client is created on first use and reused; boto3
    low-level clients are safe to share between threads.

    Args:
        session_provider: SessionProvider instance for region/endpoint config
    """

    def __init__(self, session_provider: SessionProvider) -> None:
        self._session_provider = session_provider
        self._service_name = "dynamodb"
        self._client: Optional[BaseClient] = None
        self._logger = logger.bind(component="dynamodb_client")

    @property
    def client(self) -> BaseClient:
        if self._client is None:
            self._client = self._session_provider.get_boto3_client(self._service_name)
        return self._client

    def get_item(
        self,
        table_name: str,
        Key: Dict[str, Any],
        **kwargs,
    ) -> OperationResult:
        """Get an item from DynamoDB.

        Args:
            table_name: Name of the DynamoDB table
            Key: Primary key of the item (e.g., {"id": {"S": "123"}})
            **kwargs: Additional get_item parameters (ConsistentRead, ...)

        Returns:
            OperationResult with the raw response; ``data["Item"]`` is absent
            when the item does not exist
        """
        return execute_aws_api_call(
            self.client,
            self._service_name,
            "get_item",
            TableName=table_name,
            Key=Key,
            **kwargs,
        )

    def put_item(
        self,
        table_name: str,
        Item: Dict[str, Any],
        **kwargs,
    ) -> OperationResult:
        """Put an item into DynamoDB.

        Args:
            table_name: Name of the DynamoDB table
            Item: Item to store (DynamoDB format with type descriptors)
            **kwargs: Additional put_item parameters (ConditionExpression, ...)

        Returns:
            OperationResult with status
        """
        return execute_aws_api_call(
            self.client,
            self._service_name,
            "put_item",
            TableName=table_name,
            Item=Item,
            **kwargs,
        )

    def update_item(
        self,
        table_name: str,
        Key: Dict[str, Any],
        **kwargs,
    ) -> OperationResult:
        """Update an item in DynamoDB.

        A refused ``ConditionExpression`` comes back as a CONFLICT result
        rather than an error.

        Args:
            table_name: Name of the DynamoDB table
            Key: Primary key of the item
            **kwargs: UpdateExpression, ConditionExpression and friends

        Returns:
            OperationResult with updated attributes or error
        """
        return execute_aws_api_call(
            self.client,
            self._service_name,
            "update_item",
            TableName=table_name,
            Key=Key,
            **kwargs,
        )
