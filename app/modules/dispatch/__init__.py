"""Notification dispatch module.

Idempotent push notification dispatch: an orchestrator driving the
dispatch state machine, thin intake adapters for the direct call and the
public HTTP endpoints, and the change-notification handler.

Importing this module registers the NotificationRequestCreated handler
with the infrastructure event registry.
"""

from infrastructure.notifications.errors import (
    DispatchError,
    ForbiddenError,
    GatewayError,
    InvalidArgumentError,
    StoreError,
    UnauthenticatedError,
)
from modules.dispatch.handlers import handle, process_stream_records, stream_handler
from modules.dispatch.orchestrator import DispatchOrchestrator
from modules.dispatch.outcomes import DispatchOutcome, DispatchState

__all__ = [
    "DispatchOrchestrator",
    "DispatchOutcome",
    "DispatchState",
    "handle",
    "process_stream_records",
    "stream_handler",
    # Errors
    "DispatchError",
    "InvalidArgumentError",
    "UnauthenticatedError",
    "ForbiddenError",
    "GatewayError",
    "StoreError",
]
