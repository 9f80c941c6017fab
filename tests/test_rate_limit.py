"""
tests/test_rate_limit.py -- Integration test for the POST /auth/login rate limit.

conftest.py disables the shared limiter for the rest of the suite; this module
turns it back on for one test, starting from an empty counter store, and
restores the disabled state afterwards so other modules are unaffected.

Covers:
  - LOGIN_RATE_LIMIT requests pass, the next one gets 429
  - 429 body uses the ErrorResponse envelope with code "rate_limited"
  - Retry-After header present
  - The backend is never called for throttled requests
"""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from api.limiter import limiter
from core.config import get_settings


def test_login_submissions_throttled_after_limit(web_client: tuple[TestClient, MagicMock]) -> None:
    """The (limit + 1)th POST /auth/login from one client must be rejected with 429."""
    client, backend = web_client
    allowed = int(get_settings().login_rate_limit.split("/")[0])
    bad_form = {"email": "not-an-email", "password": "short"}

    limiter.enabled = True
    limiter.reset()
    try:
        for _ in range(allowed):
            assert client.post("/auth/login", data=bad_form).status_code == 400

        resp = client.post("/auth/login", data=bad_form)

        assert resp.status_code == 429
        assert resp.json()["error"]["code"] == "rate_limited"
        assert "message" in resp.json()["error"]
        assert "retry-after" in resp.headers
        assert int(resp.headers["retry-after"]) > 0
        backend.post.assert_not_called()
    finally:
        limiter.reset()
        limiter.enabled = False


def test_login_page_not_throttled(web_client: tuple[TestClient, MagicMock]) -> None:
    """Only the submission is limited; GET /auth/login stays reachable."""
    client, _backend = web_client
    allowed = int(get_settings().login_rate_limit.split("/")[0])

    limiter.enabled = True
    limiter.reset()
    try:
        for _ in range(allowed + 2):
            assert client.get("/auth/login").status_code == 200
    finally:
        limiter.reset()
        limiter.enabled = False
