"""Push notification core.

Transport-neutral models, channel payload construction and the delivery
client that wraps the push gateway.

Usage:
    from infrastructure.notifications import (
        DeliveryClient,
        NotificationIntent,
        PayloadBuilder,
    )

    intent = NotificationIntent(recipientToken="T1", title="Time for pills")
    payload = PayloadBuilder().build(intent)
    message_id = DeliveryClient(gateway).send(payload)
"""

from infrastructure.notifications.clock import Clock, SystemClock
from infrastructure.notifications.delivery import DeliveryClient
from infrastructure.notifications.errors import (
    DispatchError,
    ForbiddenError,
    GatewayError,
    InvalidArgumentError,
    StoreError,
    UnauthenticatedError,
)
from infrastructure.notifications.gateway import PushGateway
from infrastructure.notifications.models import (
    ChannelPayload,
    DeliveryRecord,
    NotificationCategory,
    NotificationIntent,
    SentNotificationLog,
)
from infrastructure.notifications.payloads import PayloadBuilder, android_channel_for

__all__ = [
    # Models
    "ChannelPayload",
    "DeliveryRecord",
    "NotificationCategory",
    "NotificationIntent",
    "SentNotificationLog",
    # Builder and delivery
    "PayloadBuilder",
    "android_channel_for",
    "DeliveryClient",
    "PushGateway",
    # Clock
    "Clock",
    "SystemClock",
    # Errors
    "DispatchError",
    "InvalidArgumentError",
    "UnauthenticatedError",
    "ForbiddenError",
    "GatewayError",
    "StoreError",
]
