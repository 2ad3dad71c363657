"""Infrastructure AWS clients public API.

    from infrastructure.clients.aws import DynamoDBClient, SessionProvider

    dynamodb = DynamoDBClient(SessionProvider(region="ca-central-1"))
    result = dynamodb.get_item("notification_requests", {"id": {"S": "abc"}})
    if result.is_success:
        item = result.data.get("Item")
"""

from infrastructure.clients.aws.dynamodb import DynamoDBClient
from infrastructure.clients.aws.session_provider import SessionProvider

__all__ = [
    "SessionProvider",
    "DynamoDBClient",
]
