"""
web/routes.py -- HTTP routes that drive the login gateway.

These routes are the transport: they turn a Starlette Request into a
LoginContext, hand it to the LoginGateway on app.state, and turn the returned
Outcome back into a response. No login decision is made here.

Routes:
  GET  /auth/login   -- entry guard; 302 away if already signed in, else 200 {}
  POST /auth/login   -- form submission; 302 + Set-Cookie on success,
                        400/500 JSON failure payload otherwise
  POST /auth/logout  -- clear the auth-token cookie, 302 /auth/login

Security:
  [H2] POST /auth/login is rate-limited per client IP (LOGIN_RATE_LIMIT).
  [M5] Cache-Control: no-store on every login response.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Form, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from api.limiter import limiter
from api.models import LoginFailureResponse
from core.config import get_settings
from gateway.flow import LoginContext, LoginGateway
from gateway.models import Fail, Outcome, Redirect, SessionCookie
from gateway.session import clear_session_cookie, set_session_cookie

logger = logging.getLogger("loginportal.web")

router = APIRouter()


# ---------------------------------------------------------------------------
# Transport adapters
# ---------------------------------------------------------------------------


class RequestCookies:
    """CookieStore over a Starlette request.

    Reads come from the incoming Cookie header. Writes are queued and copied
    onto whichever response the route finally returns.
    """

    def __init__(self, request: Request) -> None:
        self._request = request
        self.pending: list[SessionCookie] = []

    def get(self, name: str) -> Optional[str]:
        return self._request.cookies.get(name)

    def set(self, cookie: SessionCookie) -> None:
        self.pending.append(cookie)

    def apply(self, response: Response) -> None:
        for cookie in self.pending:
            set_session_cookie(response, cookie)


def _to_response(outcome: Outcome, cookies: RequestCookies) -> Response:
    """Map a terminal gateway Outcome onto an HTTP response."""
    if isinstance(outcome, Redirect):
        resp: Response = RedirectResponse(outcome.location, status_code=outcome.status_code)
    elif isinstance(outcome, Fail):
        resp = JSONResponse(
            status_code=outcome.status_code,
            content=LoginFailureResponse.from_failure(outcome.failure).to_content(),
        )
    else:
        resp = JSONResponse(content={})
    cookies.apply(resp)
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp


def _gateway(request: Request) -> LoginGateway:
    return request.app.state.gateway


# ---------------------------------------------------------------------------
# Login / logout
# ---------------------------------------------------------------------------


@router.get("/auth/login")
def login_page(request: Request) -> Response:
    """Entry guard for the login page."""
    cookies = RequestCookies(request)
    ctx = LoginContext(cookies=cookies, query=request.query_params)
    return _to_response(_gateway(request).load(ctx), cookies)


@limiter.limit(get_settings().login_rate_limit)  # [H2] must be ABOVE @router to preserve FastAPI introspection
@router.post("/auth/login")
def login_submit(
    request: Request,
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    remember_me: Optional[str] = Form(None, alias="rememberMe"),
) -> Response:
    """Handle the login form submission.

    Fields are optional at the FastAPI layer so a missing field reaches the
    gateway's validation (and its per-field messages) instead of a 422.
    """
    cookies = RequestCookies(request)
    ctx = LoginContext(
        cookies=cookies,
        query=request.query_params,
        form={"email": email, "password": password, "rememberMe": remember_me},
    )
    return _to_response(_gateway(request).submit(ctx), cookies)


@router.post("/auth/logout")
def logout(request: Request) -> RedirectResponse:
    """Clear the auth-token cookie and redirect to the login page."""
    resp = RedirectResponse("/auth/login", status_code=302)
    clear_session_cookie(resp, secure=request.app.state.gateway.config.secure_cookies)
    resp.headers["Cache-Control"] = "no-store"
    return resp
