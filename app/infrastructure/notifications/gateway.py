"""Push gateway capability.

The gateway is external: anything that can accept a ChannelPayload and
return a message id. FcmGateway is the production implementation.
"""

from abc import ABC, abstractmethod

from infrastructure.notifications.models import ChannelPayload
from infrastructure.operations import OperationResult


class PushGateway(ABC):
    """Abstract push messaging gateway.

    Implementations make exactly one delivery attempt per call and raise
    on any rejection; they do not retry.
    """

    @property
    @abstractmethod
    def gateway_name(self) -> str:
        """Gateway identifier used in logs."""
        pass

    @abstractmethod
    def send(self, payload: ChannelPayload) -> str:
        """Deliver one message.

        Args:
            payload: Fully built channel payload

        Returns:
            Gateway-assigned message id

        Raises:
            Exception: Any transport or validation failure
        """
        pass

    @abstractmethod
    def health_check(self) -> OperationResult:
        """Check that the gateway is configured and reachable."""
        pass
