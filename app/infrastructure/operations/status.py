"""Operation status enumeration.

Status codes for results returned by low-level clients, used to decide
how a caller reacts to the outcome of a store or network call.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Error that may clear on a later attempt (network, throttling)
        PERMANENT_ERROR: Error that will not clear on its own (validation, bad table)
        UNAUTHORIZED: Credentials missing or refused
        NOT_FOUND: Resource not found
        CONFLICT: A conditional write was refused because its condition did not hold
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
