"""Integration tests for the system endpoints and middleware."""

import pytest


@pytest.mark.integration
def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.integration
def test_version(client, test_settings):
    response = client.get("/version")

    assert response.status_code == 200
    assert response.json() == {"version": test_settings.GIT_SHA}


@pytest.mark.integration
def test_correlation_id_echoed(client):
    response = client.get("/health", headers={"X-Correlation-ID": "corr-123"})

    assert response.headers["X-Correlation-ID"] == "corr-123"


@pytest.mark.integration
def test_correlation_id_generated(client):
    response = client.get("/health")

    assert response.headers["X-Correlation-ID"]


@pytest.mark.integration
def test_startup_checks_push_gateway(app, client):
    assert app.state.push_gateway_healthy is True
