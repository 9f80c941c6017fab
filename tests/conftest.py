"""
tests/conftest.py -- Shared test fixtures for the login gateway tests.

This module provides:
  - backend_response: factory for real requests.Response objects
  - backend_session:  MagicMock standing in for the backend requests.Session
  - web_client:       TestClient (follow_redirects=False) over the real ASGI app
                      with a patched lifespan wiring the mocked session in

Design: the real AuthBackendClient is kept in the integration path and only
its requests.Session is mocked, so JSON decoding and status classification
run exactly as in production. No test ever opens a network connection.

AUTH_BACKEND_URL and ALLOWED_HOSTS must be set before any api/web import:
get_settings() raises ConfigurationError without a backend URL, and
TrustedHostMiddleware would reject the TestClient's "testserver" host.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager
from typing import Any, Optional
from unittest.mock import MagicMock

# CRITICAL: set before any core/api/web import.
os.environ.setdefault("AUTH_BACKEND_URL", "http://auth-backend.test")
os.environ["ALLOWED_HOSTS"] = '["testserver", "localhost"]'

import pytest
import requests
from fastapi.testclient import TestClient

from api.limiter import limiter
from asgi import app
from gateway.backend import AuthBackendClient
from gateway.flow import GatewayConfig, LoginGateway

BACKEND_URL = "http://auth-backend.test"

# A shared per-IP counter would make test outcomes depend on test order.
# test_rate_limit.py re-enables the limiter for its own tests.
limiter.enabled = False


# ---------------------------------------------------------------------------
# Backend doubles
# ---------------------------------------------------------------------------


def _make_response(status_code: int, body: Any = None, raw: Optional[bytes] = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = raw if raw is not None else json.dumps(body if body is not None else {}).encode()
    resp.headers["Content-Type"] = "application/json"
    resp.url = BACKEND_URL + "/auth/login"
    return resp


@pytest.fixture
def backend_response() -> Callable[..., requests.Response]:
    """Return a factory: backend_response(status, body=None, raw=None) -> requests.Response."""
    return _make_response


@pytest.fixture
def backend_session() -> MagicMock:
    """A requests.Session double. Tests set .post.return_value or .post.side_effect."""
    return MagicMock(spec=requests.Session)


# ---------------------------------------------------------------------------
# ASGI client
# ---------------------------------------------------------------------------


def _patch_lifespan(gateway: LoginGateway):
    """Return an async context manager that replaces the real lifespan.

    Wires the test gateway into app.state so routes never build a client
    against the real backend URL.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.backend = gateway.backend
        app.state.gateway = gateway
        yield

    return test_lifespan


@pytest.fixture
def web_client(backend_session: MagicMock) -> Generator[tuple[TestClient, MagicMock], None, None]:
    """Yield (client, backend_session) for login route integration tests.

    Function-scoped: a successful login stores auth-token in the client's
    cookie jar, which would turn every later submit into an entry-guard
    redirect if the client were shared.

    follow_redirects=False is essential: we assert on redirect Location
    headers, which are invisible once the client follows the redirect.
    """
    gateway = LoginGateway(
        AuthBackendClient(BACKEND_URL, timeout=5.0, session=backend_session),
        GatewayConfig(secure_cookies=False),
    )
    app.router.lifespan_context = _patch_lifespan(gateway)

    with TestClient(app, follow_redirects=False, raise_server_exceptions=True) as client:
        yield client, backend_session
