"""Dispatch state machine states and the outcome of one dispatch."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class DispatchState(Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    PERMITTED = "permitted"
    SENT = "sent"
    COMMITTED = "committed"
    SKIPPED = "skipped"
    REJECTED = "rejected"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    {
        DispatchState.COMMITTED,
        DispatchState.SKIPPED,
        DispatchState.REJECTED,
        DispatchState.FAILED,
    }
)


@dataclass
class DispatchOutcome:
    """Terminal result of one dispatch.

    A FAILED outcome is never returned; it rides on the raised GatewayError.

    Attributes:
        state: Terminal state
        record_id: Backing DeliveryRecord id, None for direct sends
        message_id: Gateway message id when the notification was sent
        reason: Why a dispatch was skipped or rejected, or ``duplicate_send``
        error: Error message for a rejected or failed dispatch
        history: States visited, in order
    """

    state: DispatchState
    record_id: Optional[str] = None
    message_id: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None
    history: List[DispatchState] = field(default_factory=list)

    @property
    def sent(self) -> bool:
        return self.state == DispatchState.COMMITTED and bool(self.message_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "recordId": self.record_id,
            "messageId": self.message_id,
            "reason": self.reason,
            "error": self.error,
        }
