"""Unit tests for application startup checks."""

from unittest.mock import MagicMock

import pytest

from infrastructure.clients.fcm import FcmGateway
from server.lifespan import _check_push_gateway


@pytest.mark.unit
class TestCheckPushGateway:
    def test_healthy_gateway(self, fake_gateway):
        logger = MagicMock()

        assert _check_push_gateway(fake_gateway, logger) is True
        logger.info.assert_called_once_with("push_gateway_ready", gateway="fake")
        logger.warning.assert_not_called()

    def test_unconfigured_gateway_logged_not_raised(self):
        logger = MagicMock()

        assert _check_push_gateway(FcmGateway("", None), logger) is False
        logger.warning.assert_called_once_with(
            "push_gateway_unavailable",
            gateway="fcm",
            error="FCM_PROJECT_ID is not configured",
            error_code="MISSING_PROJECT_ID",
        )
