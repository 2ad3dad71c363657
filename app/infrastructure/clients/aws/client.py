"""Base AWS client utilities for infrastructure clients.

Provides `get_boto3_client` and `execute_aws_api_call` with the
OperationResult pattern. Calls are single-shot: retry and backoff belong
to whatever redelivers the work, not to this layer.
"""

from typing import Any, Dict, Optional

import boto3  # type: ignore
from botocore.client import BaseClient  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
import structlog

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

logger = structlog.get_logger()

THROTTLING_ERRORS = (
    "ThrottlingException",
    "ProvisionedThroughputExceededException",
    "RequestLimitExceeded",
)


def get_boto3_client(
    service_name: str,
    session_config: Optional[Dict[str, Any]] = None,
    client_config: Optional[Dict[str, Any]] = None,
) -> BaseClient:
    """Create a boto3 client for the given service.

    Args:
        service_name: AWS service name (e.g., 'dynamodb')
        session_config: Optional boto3 session kwargs (e.g., region_name)
        client_config: Optional client kwargs (e.g., endpoint_url)

    Returns:
        botocore client instance
    """
    session = boto3.Session(**(session_config or {}))
    return session.client(service_name, **(client_config or {}))


def _map_client_error(e: ClientError, service_name: str, method: str) -> OperationResult:
    error_code = e.response.get("Error", {}).get("Code")
    error_message = e.response.get("Error", {}).get("Message", str(e))

    if error_code == "ConditionalCheckFailedException":
        logger.info(
            "aws_api_condition_not_met",
            service=service_name,
            method=method,
        )
        return OperationResult.conflict(message=error_message, error_code=error_code)

    if error_code in THROTTLING_ERRORS:
        return OperationResult.transient_error(
            message=error_message, error_code=error_code
        )

    if error_code in ("AccessDeniedException", "UnrecognizedClientException"):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED, message=error_message, error_code=error_code
        )

    if error_code == "ResourceNotFoundException":
        return OperationResult.error(
            OperationStatus.NOT_FOUND, message=error_message, error_code=error_code
        )

    return OperationResult.permanent_error(message=error_message, error_code=error_code)


def execute_aws_api_call(
    client: BaseClient,
    service_name: str,
    method: str,
    **kwargs,
) -> OperationResult:
    """Execute one AWS API call and wrap the outcome in an OperationResult.

    Args:
        client: boto3 client to call
        service_name: Service name used for logging
        method: Client method name (e.g., 'update_item')
        **kwargs: Parameters passed through to the boto3 method

    Returns:
        OperationResult with the raw response in ``data`` on success
    """
    try:
        response = getattr(client, method)(**kwargs)
        return OperationResult.success(
            data=response, message=f"{service_name}.{method} succeeded"
        )
    except ClientError as e:
        mapped = _map_client_error(e, service_name, method)
        if not mapped.is_conflict:
            logger.error(
                "aws_api_error",
                service=service_name,
                method=method,
                error_code=mapped.error_code,
                error=mapped.message,
            )
        return mapped
    except BotoCoreError as e:
        logger.error(
            "aws_api_connection_error",
            service=service_name,
            method=method,
            error=str(e),
        )
        return OperationResult.transient_error(
            message=str(e), error_code="CONNECTION_ERROR"
        )
