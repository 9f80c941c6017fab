"""Tests that credentials never reach the logs.

Every gateway path is driven with a distinctive password and token at DEBUG
level; neither may appear in any captured record (message, args, or
formatted traceback).

Covers:
- FieldValidation, InvalidCredentials, TransportError, unexpected exception
- Success (token must not be logged either)
- Full ASGI request including the request-logging middleware
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
import requests

from gateway.backend import BackendTransportError
from gateway.flow import GatewayConfig, LoginContext, LoginGateway
from gateway.models import AuthFailure, AuthSuccess

_PASSWORD = "Zq9-unique-pass-7781"
_TOKEN = "tok-unique-8842"


class _Cookies:
    def __init__(self) -> None:
        self.issued = []

    def get(self, name):
        return None

    def set(self, cookie) -> None:
        self.issued.append(cookie)


def _assert_not_logged(caplog, *secrets: str) -> None:
    assert caplog.records, "expected the gateway to log something"
    for record in caplog.records:
        text = record.getMessage() + (record.exc_text or "")
        for secret in secrets:
            assert secret not in text, f"{secret!r} leaked in {record.name}: {text!r}"
    for secret in secrets:
        assert secret not in caplog.text


@pytest.mark.parametrize(
    "form, backend_outcome",
    [
        ({"email": "not-an-email", "password": _PASSWORD}, AuthSuccess(token=_TOKEN)),
        ({"email": "user@example.com", "password": _PASSWORD[:5]}, AuthSuccess(token=_TOKEN)),
        ({"email": "user@example.com", "password": _PASSWORD}, AuthFailure(status_code=401, message="bad creds")),
        ({"email": "user@example.com", "password": _PASSWORD}, BackendTransportError("POST failed: Timeout")),
        ({"email": "user@example.com", "password": _PASSWORD}, RuntimeError("boom")),
        ({"email": "user@example.com", "password": _PASSWORD, "rememberMe": "on"}, AuthSuccess(token=_TOKEN)),
    ],
    ids=["bad-email", "short-password", "invalid-credentials", "transport-error", "unexpected-error", "success"],
)
def test_gateway_never_logs_password_or_token(caplog, form, backend_outcome) -> None:
    caplog.set_level(logging.DEBUG, logger="loginportal")
    backend = MagicMock()
    if isinstance(backend_outcome, Exception):
        backend.login.side_effect = backend_outcome
    else:
        backend.login.return_value = backend_outcome

    LoginGateway(backend, GatewayConfig()).submit(LoginContext(cookies=_Cookies(), form=form))

    _assert_not_logged(caplog, _PASSWORD, _PASSWORD[:5], _TOKEN)


@pytest.mark.parametrize(
    "outcome",
    [requests.ConnectionError("refused"), None],
    ids=["transport-error", "success"],
)
def test_request_path_never_logs_password(web_client, backend_response, caplog, outcome) -> None:
    caplog.set_level(logging.DEBUG, logger="loginportal")
    client, backend = web_client
    if outcome is None:
        backend.post.return_value = backend_response(200, {"token": _TOKEN})
    else:
        backend.post.side_effect = outcome

    client.post("/auth/login", data={"email": "user@example.com", "password": _PASSWORD})

    _assert_not_logged(caplog, _PASSWORD, _TOKEN)
