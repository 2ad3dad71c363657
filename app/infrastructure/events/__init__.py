"""Infrastructure event system - in-process event dispatcher.

Usage:

    from infrastructure.events import (
        NOTIFICATION_REQUEST_CREATED,
        NotificationRequestCreated,
        dispatch_event,
        register_event_handler,
    )

    @register_event_handler(NOTIFICATION_REQUEST_CREATED)
    def on_created(event: NotificationRequestCreated):
        ...

    dispatch_event(NotificationRequestCreated.for_document("abc", {"token": "T1"}))
"""

from infrastructure.events.dispatcher import (
    clear_handlers,
    dispatch_event,
    get_handlers_for_event,
    register_event_handler,
)
from infrastructure.events.models import (
    NOTIFICATION_REQUEST_CREATED,
    Event,
    NotificationRequestCreated,
)

__all__ = [
    "Event",
    "NotificationRequestCreated",
    "NOTIFICATION_REQUEST_CREATED",
    "dispatch_event",
    "register_event_handler",
    "get_handlers_for_event",
    "clear_handlers",
]
