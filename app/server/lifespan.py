from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.events import get_handlers_for_event, NOTIFICATION_REQUEST_CREATED
from infrastructure.logging.setup import configure_logging
from infrastructure.notifications import PushGateway
from infrastructure.services import get_push_gateway, get_settings

# Registers the notification request handler with the event registry
import modules.dispatch  # noqa: F401

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(
        log_level=settings.LOG_LEVEL, is_production=settings.is_production
    )


def _check_push_gateway(gateway: PushGateway, logger: BoundLogger) -> bool:
    """Log whether the push gateway can send; startup continues either way."""
    result = gateway.health_check()
    if result.is_success:
        logger.info("push_gateway_ready", gateway=gateway.gateway_name)
    else:
        logger.warning(
            "push_gateway_unavailable",
            gateway=gateway.gateway_name,
            error=result.message,
            error_code=result.error_code,
        )
    return result.is_success


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup", store_backend=settings.store.STORE_BACKEND)
    _list_configs(settings, logger)
    logger.info(
        "event_handlers_registered",
        event_type=NOTIFICATION_REQUEST_CREATED,
        count=len(get_handlers_for_event(NOTIFICATION_REQUEST_CREATED)),
    )
    app.state.push_gateway_healthy = _check_push_gateway(get_push_gateway(), logger)

    yield

    logger.info("application_shutdown")
