"""
Name: Health + Metrics Endpoint Tests

Responsibilities:
  - /healthz reports store connectivity and echoes the request id
  - /metrics exposes Prometheus text, or 404 when disabled
  - Middleware propagates X-Request-Id
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from checkpoint.api import main
from checkpoint.crosscutting.config import get_settings
from checkpoint.crosscutting.exceptions import DatabaseError

pytestmark = pytest.mark.unit


@pytest.fixture
def client():
    return TestClient(main.app, raise_server_exceptions=False)


def test_healthz_connected(client):
    response = client.get("/healthz", headers={"X-Request-Id": "req-health-1"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["db"] == "connected"
    assert body["request_id"] == "req-health-1"
    assert response.headers["X-Request-Id"] == "req-health-1"


def test_healthz_disconnected(client, monkeypatch):
    class DownRepo:
        def ping(self):
            raise DatabaseError("connection refused")

    monkeypatch.setattr(main, "get_action_log_repository", lambda: DownRepo())

    body = client.get("/healthz").json()

    assert body["ok"] is False
    assert body["db"] == "disconnected"


def test_metrics_exposed(client):
    client.get("/healthz")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "checkpoint_requests_total" in response.text


def test_metrics_disabled(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "metrics_enabled", False)

    response = client.get("/metrics")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
