"""Intake adapters.

Thin translations from each entry shape into a NotificationIntent for the
orchestrator. They carry the per-surface rules (caller identity, shared
secret, server-side content synthesis) and nothing else.
"""

import hmac
from typing import Any, Dict, Optional

from infrastructure.auth import CallerIdentity
from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    ForbiddenError,
    InvalidArgumentError,
    NotificationCategory,
    UnauthenticatedError,
)
from modules.dispatch.orchestrator import DispatchOrchestrator
from modules.dispatch.schemas import (
    DirectSendRequest,
    PillNotificationRequest,
    PublicNotificationRequest,
    SendResponse,
)

logger = get_module_logger()

PILL_REMINDER_TITLE = "Medication Reminder"
DIRECT_TOKEN_REQUIRED = "The function must be called with a valid FCM token."
DIRECT_AUTH_REQUIRED = "The function must be called while authenticated."


def verify_shared_secret(presented: Optional[str], configured: Optional[str]) -> None:
    """Raise ForbiddenError unless ``presented`` matches the configured secret.

    An unset secret refuses every request.
    """
    if not configured or not presented:
        raise ForbiddenError("Unauthorized")
    if not hmac.compare_digest(presented.encode("utf-8"), configured.encode("utf-8")):
        raise ForbiddenError("Unauthorized")


def _require_token(token: Optional[str], message: str = "Token is required") -> str:
    if not token or not token.strip():
        raise InvalidArgumentError(message)
    return token


def send_direct(
    orchestrator: DispatchOrchestrator,
    identity: Optional[CallerIdentity],
    request: DirectSendRequest,
) -> SendResponse:
    """Authenticated direct call; no backing record, no audit entry."""
    if identity is None:
        raise UnauthenticatedError(DIRECT_AUTH_REQUIRED)
    _require_token(request.token, DIRECT_TOKEN_REQUIRED)

    data = dict(request.data)
    intent = orchestrator.validate(
        {
            "recipientToken": request.token,
            "title": request.notification.title,
            "body": request.notification.body,
            "category": NotificationCategory.parse(
                data.get("type"), orchestrator.default_category
            ),
            "structuredData": data,
        }
    )
    logger.info("direct_send_requested", caller=identity.user_id)
    outcome = orchestrator.dispatch(intent)
    return SendResponse(success=True, message_id=outcome.message_id)


def send_public(
    orchestrator: DispatchOrchestrator,
    request: PublicNotificationRequest,
    secret: Optional[str],
) -> SendResponse:
    """Public notification endpoint; writes the global sent log."""
    verify_shared_secret(request.api_key, secret)
    _require_token(request.token)

    data = dict(request.data or {})
    intent = orchestrator.validate(
        {
            "recipientToken": request.token,
            "title": request.title,
            "body": request.body,
            "category": NotificationCategory.parse(
                data.get("type"), orchestrator.default_category
            ),
            "structuredData": data,
        }
    )
    outcome = orchestrator.dispatch(intent, write_sent_log=True)
    return SendResponse(success=True, message_id=outcome.message_id)


def pill_reminder_intent(request: PillNotificationRequest) -> Dict[str, Any]:
    """Synthesize the reminder content server-side."""
    if not request.elder_name or not request.pill_name:
        raise InvalidArgumentError("elderName and pillName are required")
    data = {
        "elderName": request.elder_name,
        "pillName": request.pill_name,
        "guardianId": request.guardian_id,
    }
    return {
        "recipientToken": request.token,
        "title": PILL_REMINDER_TITLE,
        "body": f"{request.elder_name}: time to take {request.pill_name}",
        "category": NotificationCategory.MEDICATION_REMINDER,
        "structuredData": {k: v for k, v in data.items() if v is not None},
        "sourceId": request.guardian_id,
    }


def send_pill_reminder(
    orchestrator: DispatchOrchestrator,
    request: PillNotificationRequest,
    secret: Optional[str],
) -> SendResponse:
    """Pill reminder endpoint; writes the sent log and the guardian entry."""
    verify_shared_secret(request.api_key, secret)
    _require_token(request.token)

    outcome = orchestrator.dispatch(
        pill_reminder_intent(request),
        write_sent_log=True,
        write_owner_entry=True,
    )
    return SendResponse(success=True, message_id=outcome.message_id)
