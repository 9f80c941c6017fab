"""
gateway/backend.py -- Outbound call to the authentication backend.

One POST per login attempt, never retried. Repeating a credential submission
against a backend that may be failing risks tripping account lockout and
duplicating side effects; the user resubmits manually instead.

The requests.Session is owned by AuthBackendClient for connection pooling.
The app lifespan creates one client at startup and closes it on shutdown.

Outcomes:
  AuthSuccess(token)               -- 2xx with a JSON object holding a string token
  AuthFailure(status, message)     -- any non-2xx status with a JSON object body
  raises BackendTransportError     -- unreachable, timeout, or malformed response

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from gateway.models import CSRF_HEADER_NAME, AuthFailure, AuthResult, AuthSuccess, LoginRequest

logger = logging.getLogger("loginportal.gateway.backend")

LOGIN_PATH = "/auth/login"


class BackendTransportError(Exception):
    """The backend could not be reached or answered with something unusable.

    The message never contains credentials -- only the failure class and URL.
    """


class AuthBackendClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.login_url = base_url.rstrip("/") + LOGIN_PATH
        self.timeout = timeout
        self._session = session or requests.Session()

    def login(self, credentials: LoginRequest, csrf_token: str) -> AuthResult:
        """POST the credentials and classify the answer. Single attempt.

        Args:
            credentials: The validated submission.
            csrf_token:  Value forwarded in the X-CSRF-Token header. Empty
                         string when the request carried no XSRF-TOKEN cookie.

        Raises:
            BackendTransportError: On connection failure, timeout, or a body
                that is not a JSON object (or lacks a token on success).
        """
        try:
            resp = self._session.post(
                self.login_url,
                json={
                    "email": credentials.email,
                    "password": credentials.password,
                    "rememberMe": credentials.remember_me,
                },
                headers={
                    "Content-Type": "application/json",
                    CSRF_HEADER_NAME: csrf_token,
                },
                timeout=self.timeout,
                allow_redirects=False,
            )
        except requests.RequestException as e:
            raise BackendTransportError(f"POST {self.login_url} failed: {type(e).__name__}") from e

        body = _json_object(resp)

        if 200 <= resp.status_code < 300:
            token = body.get("token")
            if not isinstance(token, str) or not token:
                raise BackendTransportError(f"POST {self.login_url} returned {resp.status_code} without a token")
            return AuthSuccess(token=token)

        message = body.get("message")
        return AuthFailure(
            status_code=resp.status_code,
            message=message if isinstance(message, str) else "",
        )

    def close(self) -> None:
        self._session.close()


def _json_object(resp: requests.Response) -> dict[str, Any]:
    """Decode the response body as a JSON object or raise BackendTransportError."""
    try:
        body = resp.json()
    except ValueError as e:
        raise BackendTransportError(f"backend returned {resp.status_code} with a non-JSON body") from e
    if not isinstance(body, dict):
        raise BackendTransportError(f"backend returned {resp.status_code} with a non-object JSON body")
    return body
