"""Test factories for the dispatch pipeline.

Fakes for the injected capabilities (clock, push gateway) and builders for
DynamoDB Streams records.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from infrastructure.notifications import ChannelPayload, Clock, PushGateway
from infrastructure.operations import OperationResult

FIXED_NOW = datetime(2024, 5, 1, 8, 30, 0, tzinfo=timezone.utc)

TEST_API_KEY = "test-api-key"


class FixedClock(Clock):
    """Clock frozen at a given instant; ``advance`` moves it forward."""

    def __init__(self, now: datetime = FIXED_NOW):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now = self._now + timedelta(seconds=seconds)


class FakeGateway(PushGateway):
    """Records every payload; raises ``error`` when set."""

    def __init__(self, error: Optional[Exception] = None):
        self.sent: List[ChannelPayload] = []
        self.error = error

    @property
    def gateway_name(self) -> str:
        return "fake"

    def send(self, payload: ChannelPayload) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append(payload)
        return f"projects/test/messages/{len(self.sent)}"

    def health_check(self) -> OperationResult:
        return OperationResult.success(message="fake gateway ok")


def make_stream_record(
    record_id: str = "req-1",
    event_name: str = "INSERT",
    event_id: str = "evt-1",
    token: str = "T1",
    category: str = "medication-reminder",
) -> Dict[str, Any]:
    """Create a DynamoDB Streams record in the wire format.

    Args:
        record_id: Document id, also used as the key
        event_name: INSERT, MODIFY or REMOVE
        event_id: Stream event id reported back on failure
        token: Device token stored in the document
        category: Category stored in the document
    """
    return {
        "eventID": event_id,
        "eventName": event_name,
        "dynamodb": {
            "Keys": {"id": {"S": record_id}},
            "NewImage": {
                "id": {"S": record_id},
                "token": {"S": token},
                "title": {"S": "Time for pills"},
                "body": {"S": "Take aspirin"},
                "category": {"S": category},
                "guardianId": {"S": "guardian-1"},
                "processed": {"BOOL": False},
            },
        },
    }
