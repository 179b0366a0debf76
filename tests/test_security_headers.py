# =============================================================================
# tests/test_security_headers.py - Security Header Tests
# =============================================================================

import pytest
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from axel.middleware.security import SECURITY_HEADERS


@pytest.mark.parametrize(
    "path, status",
    [
        ("/health", 200),
        ("/missing", 404),
        ("/boom", 500),
    ],
)
def test_headers_on_every_status(client, path, status):
    response = client.get(path)

    assert response.status_code == status
    for name, value in SECURITY_HEADERS.items():
        assert response.headers[name] == value


def test_headers_on_body_parse_failure(client):
    response = client.post(
        "/echo",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 500
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"


def test_no_powered_by_header(client):
    response = client.get("/health")
    assert "x-powered-by" not in response.headers


def test_expected_header_values():
    assert SECURITY_HEADERS["X-Content-Type-Options"] == "nosniff"
    assert SECURITY_HEADERS["Referrer-Policy"] == "no-referrer"
    assert "frame-ancestors 'self'" in SECURITY_HEADERS["Content-Security-Policy"]


@pytest.fixture
def framed_client(app):
    """Client for an app with a route that sets its own X-Frame-Options."""

    @app.get("/framed")
    async def framed():
        return JSONResponse({"ok": True}, headers={"X-Frame-Options": "DENY"})

    with TestClient(app) as client:
        yield client


def test_handler_headers_not_overridden(framed_client):
    response = framed_client.get("/framed")

    assert response.headers["X-Frame-Options"] == "DENY"
