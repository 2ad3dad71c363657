"""Firebase Cloud Messaging gateway client."""

from infrastructure.clients.fcm.client import FcmGateway, FcmSendError

__all__ = ["FcmGateway", "FcmSendError"]
