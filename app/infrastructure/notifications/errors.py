"""Dispatch error taxonomy.

Every failure a dispatch can surface derives from DispatchError and
carries a transport-neutral ``code``; the HTTP surfaces map the code onto
a status. A skip for an already processed record is not an error and has
no class here.
"""

from typing import Any, Optional


class DispatchError(Exception):
    """Base class for dispatch failures.

    Attributes:
        message: human-friendly message
        code: machine code shared with the HTTP surfaces
    """

    code = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(DispatchError):
    """Missing or malformed token or required field. Raised before any external call."""

    code = "invalid-argument"


class UnauthenticatedError(DispatchError):
    """The direct-call surface was invoked without a caller identity."""

    code = "unauthenticated"


class ForbiddenError(DispatchError):
    """The shared secret presented to a public surface did not match."""

    code = "forbidden"


class GatewayError(DispatchError):
    """The push gateway rejected or failed to accept a message.

    Attributes:
        cause: opaque cause string reported by the gateway or transport
        outcome: FAILED dispatch outcome, attached by the orchestrator
    """

    def __init__(self, cause: str):
        super().__init__(cause)
        self.cause = cause
        self.outcome: Optional[Any] = None


class StoreError(DispatchError):
    """A durable read or write failed.

    Attributes:
        message_id: set when the failure happened after the gateway had
            already accepted the message; the send is not undone
    """

    def __init__(self, message: str, message_id: Optional[str] = None):
        super().__init__(message)
        self.message_id = message_id
