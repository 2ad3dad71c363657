"""Infrastructure modules for the push dispatch service.

Centralized infrastructure components:
- configuration: Settings management (settings, Settings)
- logging: Structured logging (get_module_logger, bind_request_context)
- operations: Operation results returned by low-level clients
- clients: AWS DynamoDB and FCM HTTP v1 clients
- notifications: Intent/payload models, payload builder, delivery client
- persistence: Durable store for delivery records and audit entries
- idempotency: Idempotency guard over delivery records
- events: In-process event registry
- security / auth: JWT validation and caller identity
- services: Dependency injection providers (get_settings, get_orchestrator)
"""

# Configuration
from infrastructure.configuration import settings

# Logging
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "settings",
    "get_module_logger",
    "OperationResult",
    "OperationStatus",
]
