"""
gateway/flow.py -- The login gateway: one request, end to end.

State machine for submit():

  Idle -> Validating -> FieldValidation (400, terminal)
                     -> Exchanging -> TransportError     (500, terminal)
                                   -> InvalidCredentials (400, terminal)
                                   -> Establishing -> Redirecting (302, terminal)

  The entry guard short-circuits Idle -> Redirecting when the request already
  carries a valid session cookie. load() runs only the entry guard.

Every step returns a tagged Outcome (Continue | Redirect | Fail). The driver
checks the tag after each step and stops at the first terminal one.

Security notes:
  [G1] A SessionCookie is only built from AuthSuccess. No other path reaches
       _establish_session().
  [G2] Every redirect location comes from resolve_redirect() -- both the
       entry and the exit guard.
  [G3] The password never appears in a LoginFailure, a log line, or an
       exception message raised from here.
  [G4] The XSRF-TOKEN cookie is forwarded as-is, or as "" when absent.
       Requests without it still reach the backend; the backend decides.

Layer rule: no imports from api/ or web/. The transport hands in a
LoginContext and applies the returned Outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from gateway.backend import BackendTransportError
from gateway.models import (
    CSRF_COOKIE_NAME,
    MSG_FIX_ERRORS,
    MSG_INVALID_CREDENTIALS,
    MSG_UNEXPECTED,
    SESSION_COOKIE_NAME,
    AuthFailure,
    AuthResult,
    Continue,
    Fail,
    LoginFailure,
    LoginRequest,
    Outcome,
    Redirect,
    SessionCookie,
)
from gateway.redirects import DEFAULT_REDIRECT, resolve_redirect
from gateway.session import build_session_cookie, is_session_token_valid
from gateway.validation import extract_credentials, validate_credentials

logger = logging.getLogger("loginportal.gateway")


class CookieStore(Protocol):
    """The transport's cookie capability: read request cookies, queue response cookies."""

    def get(self, name: str) -> Optional[str]: ...

    def set(self, cookie: SessionCookie) -> None: ...


class AuthBackend(Protocol):
    def login(self, credentials: LoginRequest, csrf_token: str) -> AuthResult: ...


@dataclass
class LoginContext:
    """Everything the gateway may read from one incoming request.

    query is the parsed query string; form is None for load() and the
    submitted form fields for submit().
    """

    cookies: CookieStore
    query: Mapping[str, str] = field(default_factory=dict)
    form: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class GatewayConfig:
    """Per-deployment inputs. Built once from Settings by the app lifespan."""

    secure_cookies: bool = False
    default_redirect: str = DEFAULT_REDIRECT
    pass_through_backend_message: bool = True
    session_token_secret: str = ""
    session_token_algorithms: Sequence[str] = ("HS256",)


class LoginGateway:
    """Request-scoped control flow over a shared, stateless configuration.

    Holds no per-request state: concurrent calls to load()/submit() never
    interact except through the backend client's connection pool.
    """

    def __init__(self, backend: AuthBackend, config: Optional[GatewayConfig] = None) -> None:
        self.backend = backend
        self.config = config or GatewayConfig()

    # ------------------------------------------------------------------
    # Inbound operations
    # ------------------------------------------------------------------

    def load(self, ctx: LoginContext) -> Outcome:
        """Initial page render. Redirects away when already signed in."""
        return self._entry_guard(ctx)

    def submit(self, ctx: LoginContext) -> Outcome:
        """Form submission: validate -> exchange -> establish -> redirect."""
        outcome = self._entry_guard(ctx)
        if isinstance(outcome, Redirect):
            return outcome

        credentials = extract_credentials(ctx.form)

        outcome = self._validate(credentials)
        if isinstance(outcome, Fail):
            return outcome

        outcome = self._exchange(credentials, ctx)
        if isinstance(outcome, Fail):
            return outcome

        self._establish_session(ctx, outcome.value, credentials.remember_me)
        return self._exit_guard(ctx)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _entry_guard(self, ctx: LoginContext) -> Outcome:
        token = ctx.cookies.get(SESSION_COOKIE_NAME)
        if is_session_token_valid(
            token,
            self.config.session_token_secret,
            self.config.session_token_algorithms,
        ):
            target = self._redirect_target(ctx)
            logger.debug("Session cookie present, skipping login (-> %s)", target)
            return Redirect(target)
        return Continue()

    def _validate(self, credentials: LoginRequest) -> Outcome:
        errors = validate_credentials(credentials)
        if errors:
            logger.info("Login form rejected: invalid fields %s", sorted(errors))
            return self._fail(400, "field_validation", MSG_FIX_ERRORS, credentials, field_errors=errors)
        return Continue()

    def _exchange(self, credentials: LoginRequest, ctx: LoginContext) -> Outcome:
        csrf_token = ctx.cookies.get(CSRF_COOKIE_NAME)
        if not csrf_token:
            logger.debug("No %s cookie on login submission; forwarding empty token", CSRF_COOKIE_NAME)  # [G4]

        try:
            result = self.backend.login(credentials, csrf_token or "")
        except BackendTransportError as e:
            logger.error("Login exchange failed: %s", e)  # [G3] message carries no credentials
            return self._fail(500, "transport_error", MSG_UNEXPECTED, credentials)
        except Exception:
            logger.exception("Unexpected error during login exchange")
            return self._fail(500, "transport_error", MSG_UNEXPECTED, credentials)

        if isinstance(result, AuthFailure):
            logger.info("Login rejected by backend (status=%d)", result.status_code)
            message = MSG_INVALID_CREDENTIALS
            if self.config.pass_through_backend_message and result.message:
                message = result.message
            return self._fail(400, "invalid_credentials", message, credentials)

        return Continue(result.token)

    def _establish_session(self, ctx: LoginContext, token: str, remember_me: bool) -> None:
        cookie = build_session_cookie(token, remember_me, self.config.secure_cookies)  # [G1]
        ctx.cookies.set(cookie)
        logger.info("Session established (max_age=%ds)", cookie.max_age_seconds)

    def _exit_guard(self, ctx: LoginContext) -> Outcome:
        return Redirect(self._redirect_target(ctx))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _redirect_target(self, ctx: LoginContext) -> str:
        return resolve_redirect(ctx.query.get("redirect"), self.config.default_redirect)  # [G2]

    @staticmethod
    def _fail(
        status_code: int,
        kind: str,
        error: str,
        credentials: LoginRequest,
        field_errors: Optional[dict[str, str]] = None,
    ) -> Fail:
        return Fail(
            status_code=status_code,
            failure=LoginFailure(
                kind=kind,
                error=error,
                email=credentials.email,
                remember_me=credentials.remember_me,
                field_errors=field_errors,
            ),
        )
