"""Event dispatcher for the infrastructure event system.

In-process handler registry. Handlers are registered with a decorator and
called synchronously, in registration order, when an event is dispatched.
"""

from threading import Lock
from typing import Any, Callable, Dict, List

from infrastructure.events.models import Event
from infrastructure.logging import get_module_logger

logger = get_module_logger()

# Event handler registry: event_type -> list of handlers
EVENT_HANDLERS: Dict[str, List[Callable[[Event], Any]]] = {}
_registry_lock = Lock()


def register_event_handler(event_type: str):
    """Decorator to register an event handler for a specific event type.

    Args:
        event_type: The type of event to handle (e.g., 'notification_request.created').

    Returns:
        Decorator function that registers the handler.
    """

    def decorator(handler_func: Callable[[Event], Any]) -> Callable[[Event], Any]:
        with _registry_lock:
            handlers = EVENT_HANDLERS.setdefault(event_type, [])
            if handler_func not in handlers:
                handlers.append(handler_func)
            total = len(handlers)
        logger.debug(
            "registered_event_handler",
            handler=getattr(handler_func, "__name__", "unknown"),
            event_type=event_type,
            total_handlers=total,
        )
        return handler_func

    return decorator


def dispatch_event(event: Event, raise_errors: bool = False) -> List[Any]:
    """Dispatch event synchronously to all registered handlers.

    By default a failing handler is logged and the remaining handlers still
    run. With ``raise_errors`` the first failure propagates, which lets the
    caller hand the event back to its source for redelivery.

    Args:
        event: The event to dispatch.
        raise_errors: Propagate handler exceptions instead of logging them.

    Returns:
        List of return values from the handlers that completed.
    """
    results = []
    handlers = get_handlers_for_event(event.event_type)

    logger.info(
        "dispatching_event",
        event_type=event.event_type,
        handler_count=len(handlers),
        correlation_id=str(event.correlation_id),
    )

    for handler in handlers:
        try:
            results.append(handler(event))
        except Exception as e:
            logger.error(
                "event_handler_failed",
                handler=getattr(handler, "__name__", "unknown"),
                event_type=event.event_type,
                error=str(e),
                correlation_id=str(event.correlation_id),
            )
            if raise_errors:
                raise

    return results


def get_handlers_for_event(event_type: str) -> List[Callable[[Event], Any]]:
    """Get a snapshot of the handlers registered for an event type."""
    with _registry_lock:
        return list(EVENT_HANDLERS.get(event_type, []))


def clear_handlers() -> None:
    """Clear all registered handlers.

    WARNING: This is intended for testing only.
    """
    with _registry_lock:
        EVENT_HANDLERS.clear()
    logger.debug("cleared_all_event_handlers")
