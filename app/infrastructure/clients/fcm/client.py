"""Firebase Cloud Messaging HTTP v1 gateway.

Sends one message per call to
``POST {api_url}/v1/projects/{project_id}/messages:send`` using a
service-account OAuth2 access token.
"""

import json
from threading import Lock
from typing import Any, Dict, Optional

import google.auth.transport.requests
import requests
import structlog
from google.oauth2 import service_account

from infrastructure.notifications.gateway import PushGateway
from infrastructure.notifications.models import ChannelPayload
from infrastructure.operations import OperationResult

logger = structlog.get_logger()

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"


class FcmSendError(Exception):
    """FCM refused a message.

    Attributes:
        status_code: HTTP status returned by FCM
        error_status: FCM error status (e.g. UNREGISTERED, INVALID_ARGUMENT)
    """

    def __init__(self, status_code: int, error_status: str, message: str):
        super().__init__(f"{error_status}: {message}" if error_status else message)
        self.status_code = status_code
        self.error_status = error_status


class FcmGateway(PushGateway):
    """PushGateway backed by the FCM HTTP v1 API.

    Args:
        project_id: Firebase project id
        credentials_json: Service account JSON key content
        api_url: FCM API base URL
        timeout_seconds: Bound on each HTTP request
        session: Optional requests session (tests, connection pooling)
    """

    def __init__(
        self,
        project_id: str,
        credentials_json: Optional[str],
        api_url: str = "https://fcm.googleapis.com",
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.project_id = project_id
        self._credentials_json = credentials_json
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._credentials: Optional[service_account.Credentials] = None
        self._credentials_lock = Lock()
        logger.info("initialized_fcm_gateway", project_id=project_id)

    @property
    def gateway_name(self) -> str:
        return "fcm"

    @property
    def send_url(self) -> str:
        return f"{self._api_url}/v1/projects/{self.project_id}/messages:send"

    def send(self, payload: ChannelPayload) -> str:
        """Send one message and return its FCM name (projects/<p>/messages/<id>)."""
        headers = {
            "Authorization": f"Bearer {self._access_token()}",
            "Content-Type": "application/json; UTF-8",
        }
        body = {"message": payload.to_fcm_message()}
        response = self._session.post(
            self.send_url,
            data=json.dumps(body),
            headers=headers,
            timeout=self._timeout,
        )

        if response.status_code != 200:
            raise _error_from_response(response)

        return response.json().get("name", "")

    def health_check(self) -> OperationResult:
        """Check that an access token can be obtained."""
        if not self.project_id:
            return OperationResult.permanent_error(
                message="FCM_PROJECT_ID is not configured",
                error_code="MISSING_PROJECT_ID",
            )
        try:
            self._access_token()
            return OperationResult.success(
                message="FCM credentials valid",
                data={"project_id": self.project_id},
            )
        except Exception as e:
            logger.error("fcm_health_check_failed", error=str(e), exc_info=True)
            return OperationResult.transient_error(
                message=f"Health check failed: {str(e)}",
                error_code="HEALTH_CHECK_ERROR",
            )

    def _access_token(self) -> str:
        with self._credentials_lock:
            if self._credentials is None:
                self._credentials = self._load_credentials()
            if not self._credentials.valid:
                self._credentials.refresh(google.auth.transport.requests.Request())
            return self._credentials.token

    def _load_credentials(self) -> service_account.Credentials:
        if not self._credentials_json:
            raise ValueError("FCM_CREDENTIALS_JSON is not configured")
        try:
            creds_info = json.loads(self._credentials_json)
        except json.JSONDecodeError as e:
            logger.error("invalid_fcm_credentials_json", error=str(e))
            raise ValueError("Invalid FCM credentials JSON") from e
        return service_account.Credentials.from_service_account_info(
            creds_info, scopes=[FCM_SCOPE]
        )


def _error_from_response(response: requests.Response) -> FcmSendError:
    """Build FcmSendError from an FCM error body, tolerating non-JSON bodies."""
    error: Dict[str, Any] = {}
    try:
        error = response.json().get("error", {}) or {}
    except ValueError:
        pass

    error_status = error.get("status", "")
    for detail in error.get("details", []) or []:
        if detail.get("errorCode"):
            error_status = detail["errorCode"]
            break

    message = error.get("message") or f"FCM returned HTTP {response.status_code}"
    return FcmSendError(response.status_code, error_status, message)
