# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Builds an app with a few extra routes for exercising the error paths
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# Importing axel.main builds the module-level app from the environment

os.environ.setdefault("NODE_ENV", "test")
os.environ.setdefault("DEBUG", "false")

import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.testclient import TestClient

from axel.config import Settings
from axel.main import create_app

ALLOWED_ORIGIN = "https://app.example.com"
OTHER_ALLOWED_ORIGIN = "https://admin.example.com"
SECRET_ERROR_DETAIL = "db password is hunter2"


def make_settings(**overrides) -> Settings:
    """Settings that ignore any .env file in the working directory."""
    return Settings(_env_file=None, **overrides)


def install_test_routes(app: FastAPI) -> None:
    """Routes that only exist in tests."""

    @app.get("/boom")
    async def boom():
        raise RuntimeError(SECRET_ERROR_DETAIL)

    @app.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=418, detail="short and stout")

    @app.post("/echo")
    async def echo(request: Request):
        body = request.state.body
        if isinstance(body, bytes):
            return {"raw": body.decode()}
        return {"body": body}

    @app.post("/echo-raw")
    async def echo_raw(request: Request):
        raw = await request.body()
        return {"raw": raw.decode(), "length": len(raw)}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Settings with an explicit two-origin allow-list."""
    return make_settings(
        ALLOWED_ORIGINS=f"{ALLOWED_ORIGIN},{OTHER_ALLOWED_ORIGIN}",
        NODE_ENV="test",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    install_test_routes(app)
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
