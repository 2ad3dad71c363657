"""Fixtures for HTTP surface integration tests.

The application is built with ``create_app`` and its providers overridden,
so requests run through the real routers, middleware and orchestrator with
only the push gateway and the store replaced.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from infrastructure.auth import CallerIdentity
from infrastructure.configuration import Settings
from infrastructure.configuration.features import DispatchSettings
from infrastructure.services import get_caller_identity, get_orchestrator, get_settings
from server.server import create_app
from tests.factories import TEST_API_KEY


@pytest.fixture
def test_settings():
    return Settings(dispatch=DispatchSettings(API_KEY=TEST_API_KEY))


@pytest.fixture
def app(orchestrator, test_settings, fake_gateway):
    app = create_app()
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_settings] = lambda: test_settings
    with patch("server.lifespan.get_push_gateway", return_value=fake_gateway):
        yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def authenticated_client(app, client):
    identity = CallerIdentity(user_id="user-42", email="guardian@example.com")
    app.dependency_overrides[get_caller_identity] = lambda: identity
    return client
