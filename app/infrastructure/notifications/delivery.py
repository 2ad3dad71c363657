"""Delivery client.

Wraps the push gateway and normalizes every failure into GatewayError.
There is no retry here: only the orchestrator knows whether another
attempt would break the at-most-once guarantee.
"""

import structlog

from infrastructure.logging import redact_token
from infrastructure.notifications.errors import GatewayError
from infrastructure.notifications.gateway import PushGateway
from infrastructure.notifications.models import ChannelPayload

logger = structlog.get_logger()


class DeliveryClient:
    """Single-attempt sender on top of a PushGateway.

    Args:
        gateway: The external gateway capability
    """

    def __init__(self, gateway: PushGateway):
        self.gateway = gateway

    def send(self, payload: ChannelPayload) -> str:
        """Send ``payload`` once.

        Returns:
            Gateway-assigned message id

        Raises:
            GatewayError: on any rejection or transport fault
        """
        try:
            message_id = self.gateway.send(payload)
        except GatewayError:
            raise
        except Exception as e:
            logger.warning(
                "gateway_send_failed",
                gateway=self.gateway.gateway_name,
                device_prefix=redact_token(payload.token),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GatewayError(str(e) or type(e).__name__) from e

        if not message_id:
            raise GatewayError("Gateway returned no message id")

        logger.debug(
            "gateway_send_succeeded",
            gateway=self.gateway.gateway_name,
            message_id=message_id,
        )
        return message_id
