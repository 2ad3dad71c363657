"""Session provider for AWS client operations.

Centralizes region and endpoint configuration so per-service clients
don't need to duplicate it.
"""

from typing import Any, Dict, Optional

from botocore.client import BaseClient  # type: ignore
import structlog

from infrastructure.clients.aws.client import get_boto3_client

logger = structlog.get_logger()


class SessionProvider:
    """Provider for AWS session configuration.

    Args:
        region: AWS region for all clients (e.g., 'ca-central-1')
        endpoint_url: Custom endpoint URL (local DynamoDB, LocalStack)
    """

    def __init__(
        self,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        self.region = region
        self.endpoint_url = endpoint_url

    def build_client_kwargs(self) -> Dict[str, Any]:
        """Build session and client configuration kwargs for boto3."""
        session_config: Dict[str, Any] = {}
        client_config: Dict[str, Any] = {}

        if self.region:
            session_config["region_name"] = self.region
            client_config["region_name"] = self.region

        if self.endpoint_url:
            client_config["endpoint_url"] = self.endpoint_url

        return {
            "session_config": session_config or None,
            "client_config": client_config or None,
        }

    def get_boto3_client(self, service_name: str) -> BaseClient:
        """Get a configured boto3 client for the given service."""
        kw = self.build_client_kwargs()
        logger.debug(
            "creating_boto3_client",
            service_name=service_name,
            region=self.region,
            endpoint_url=self.endpoint_url,
        )
        return get_boto3_client(
            service_name,
            session_config=kw["session_config"],
            client_config=kw["client_config"],
        )
