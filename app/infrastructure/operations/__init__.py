"""Operation result types and status enums.

Standardized result types returned by low-level clients (DynamoDB) so
callers branch on a status instead of catching SDK exceptions.
"""

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
]
