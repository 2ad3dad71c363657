"""Notification endpoints.

- ``POST /notifications/send``: authenticated direct call
- ``/public/notifications``: shared-secret endpoint for trusted clients
- ``/public/pill-notifications``: shared-secret pill reminder endpoint

The public endpoints answer their own CORS preflight and every verb, so
their status codes and bodies stay exactly what mobile and web clients
expect (204, 405, 403 with ``{"error": ...}``).
"""

import json
from typing import Any, Callable, Dict, Optional, Type

from fastapi import APIRouter, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    DispatchError,
    ForbiddenError,
    InvalidArgumentError,
    UnauthenticatedError,
)
from infrastructure.services import CallerIdentityDep, OrchestratorDep, SettingsDep
from modules.dispatch import adapters
from modules.dispatch.orchestrator import validation_message
from modules.dispatch.schemas import (
    DirectSendRequest,
    PillNotificationRequest,
    PublicNotificationRequest,
)

logger = get_module_logger()
router = APIRouter(tags=["Notifications"])

ALLOWED_METHODS = "POST, OPTIONS"
PUBLIC_CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
PREFLIGHT_HEADERS = {
    **PUBLIC_CORS_HEADERS,
    "Access-Control-Allow-Methods": ALLOWED_METHODS,
    "Access-Control-Allow-Headers": "Content-Type",
}
PUBLIC_METHODS = ["POST", "OPTIONS", "GET", "PUT", "PATCH", "DELETE", "HEAD"]


def direct_error_response(error: DispatchError) -> JSONResponse:
    """Map a dispatch error onto the direct-call surface."""
    if isinstance(error, InvalidArgumentError):
        return JSONResponse(
            status_code=400, content={"code": error.code, "message": error.message}
        )
    if isinstance(error, UnauthenticatedError):
        return JSONResponse(
            status_code=401, content={"code": error.code, "message": error.message}
        )
    if isinstance(error, ForbiddenError):
        return JSONResponse(
            status_code=403, content={"code": error.code, "message": error.message}
        )
    return JSONResponse(
        status_code=500, content={"code": "internal", "message": error.message}
    )


def public_response(
    status_code: int,
    content: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers={**PUBLIC_CORS_HEADERS, **(headers or {})},
    )


def public_error_response(error: DispatchError) -> JSONResponse:
    """Map a dispatch error onto the public surface."""
    if isinstance(error, ForbiddenError):
        return public_response(403, {"error": "Unauthorized"})
    if isinstance(error, InvalidArgumentError):
        return public_response(400, {"error": error.message})
    return public_response(500, {"error": error.message})


async def _read_json_object(request: Request) -> Optional[Dict[str, Any]]:
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


async def _handle_public(
    request: Request,
    schema: Type[BaseModel],
    send: Callable[[BaseModel], Any],
) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=PREFLIGHT_HEADERS)
    if request.method != "POST":
        return public_response(
            405, {"error": "Method not allowed"}, headers={"Allow": ALLOWED_METHODS}
        )

    body = await _read_json_object(request)
    if body is None:
        return public_response(400, {"error": "Invalid JSON body"})
    try:
        payload = schema.model_validate(body)
    except ValidationError as e:
        return public_response(400, {"error": validation_message(e)})

    try:
        result = await run_in_threadpool(send, payload)
    except DispatchError as e:
        logger.warning(
            "public_notification_failed",
            path=request.url.path,
            code=e.code,
            error=e.message,
        )
        return public_error_response(e)
    return public_response(200, result.model_dump(by_alias=True))


@router.post("/notifications/send")
async def send_notification(
    request: Request,
    identity: CallerIdentityDep,
    orchestrator: OrchestratorDep,
):
    """Send a notification to one device on behalf of an authenticated caller.

    Body: ``{"token": ..., "notification": {"title", "body"}, "data": {...}}``.
    Returns ``{"success": true, "messageId": ...}``. A malformed body is an
    ``invalid-argument`` error like any other bad field.
    """
    if identity is None:
        error = UnauthenticatedError(adapters.DIRECT_AUTH_REQUIRED)
        return direct_error_response(error)

    body = await _read_json_object(request)
    if body is None:
        return direct_error_response(InvalidArgumentError("Invalid JSON body"))
    try:
        payload = DirectSendRequest.model_validate(body)
    except ValidationError as e:
        return direct_error_response(InvalidArgumentError(validation_message(e)))

    try:
        result = await run_in_threadpool(
            adapters.send_direct, orchestrator, identity, payload
        )
    except DispatchError as e:
        return direct_error_response(e)
    return result.model_dump(by_alias=True)


@router.api_route("/public/notifications", methods=PUBLIC_METHODS)
async def public_notification(
    request: Request,
    orchestrator: OrchestratorDep,
    settings: SettingsDep,
):
    """Shared-secret notification endpoint.

    Body: ``{"token", "title", "body", "data", "apiKey"}``.
    """
    secret = settings.dispatch.PUBLIC_API_KEY
    return await _handle_public(
        request,
        PublicNotificationRequest,
        lambda payload: adapters.send_public(orchestrator, payload, secret),
    )


@router.api_route("/public/pill-notifications", methods=PUBLIC_METHODS)
async def public_pill_notification(
    request: Request,
    orchestrator: OrchestratorDep,
    settings: SettingsDep,
):
    """Shared-secret pill reminder endpoint.

    Body: ``{"token", "elderName", "pillName", "guardianId", "apiKey"}``; the
    title and body are synthesized server-side.
    """
    secret = settings.dispatch.PUBLIC_API_KEY
    return await _handle_public(
        request,
        PillNotificationRequest,
        lambda payload: adapters.send_pill_reminder(orchestrator, payload, secret),
    )
