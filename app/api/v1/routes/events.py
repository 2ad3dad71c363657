"""Change-feed endpoint for created notification request documents."""

from typing import Optional

from fastapi import APIRouter, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from infrastructure.events import NotificationRequestCreated
from infrastructure.logging import get_module_logger
from infrastructure.notifications import DispatchError
from infrastructure.services import OrchestratorDep, SettingsDep
from modules.dispatch import handle
from modules.dispatch.adapters import verify_shared_secret
from modules.dispatch.orchestrator import validation_message
from modules.dispatch.schemas import ChangeFeedRequest

logger = get_module_logger()
router = APIRouter(tags=["Events"])


@router.post("/events/notification-requests")
async def notification_request_created(
    request: Request,
    orchestrator: OrchestratorDep,
    settings: SettingsDep,
    x_api_key: Optional[str] = Header(default=None),
):
    """Handle one created notification request document.

    Body: ``{"id": ..., "document": {...}}``, checked only after the
    ``X-Api-Key`` header. The feed delivers at least once; a non-2xx response
    asks it to redeliver. Returns the dispatch outcome (``committed``,
    ``skipped`` or ``rejected``).
    """
    try:
        verify_shared_secret(x_api_key, settings.dispatch.PUBLIC_API_KEY)
    except DispatchError:
        return JSONResponse(status_code=403, content={"error": "Unauthorized"})

    try:
        feed_request = ChangeFeedRequest.model_validate_json(await request.body())
    except ValidationError as e:
        return JSONResponse(
            status_code=400,
            content={"code": "invalid-argument", "message": validation_message(e)},
        )

    event = NotificationRequestCreated.for_document(
        feed_request.id, feed_request.document, source="change_feed"
    )
    try:
        outcome = await run_in_threadpool(handle, event, orchestrator)
    except DispatchError as e:
        logger.error(
            "change_feed_dispatch_failed",
            record_id=feed_request.id,
            code=e.code,
            error=e.message,
        )
        return JSONResponse(
            status_code=500, content={"code": "internal", "message": e.message}
        )
    return outcome.to_dict()
