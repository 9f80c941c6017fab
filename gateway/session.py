"""
gateway/session.py -- Session cookie construction and session token checks.

Security design decisions:
  Cookie: httponly=True so JS cannot read the token (XSS mitigation);
       samesite="lax" so the cookie rides same-site navigations and top-level
       GET links but not cross-site POSTs (CSRF mitigation for most cases);
       secure only when the deployment is production -- passed in by the
       caller, never read from the environment here.

  Lifetime: 30 days when the user ticked "remember me", otherwise 1 day.

  Token check: the backend issues the token, so by default the gateway can
       only check that one is present. When a shared SESSION_TOKEN_SECRET is
       configured, the token is also verified as a JWT (python-jose) so an
       expired or forged cookie does not skip the login form.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from jose import JWTError, jwt

from gateway.models import DEFAULT_MAX_AGE, REMEMBER_ME_MAX_AGE, SESSION_COOKIE_NAME, SessionCookie

logger = logging.getLogger("loginportal.gateway.session")


def session_max_age(remember_me: bool) -> int:
    return REMEMBER_ME_MAX_AGE if remember_me else DEFAULT_MAX_AGE


def build_session_cookie(token: str, remember_me: bool, secure: bool) -> SessionCookie:
    """Compute every attribute of the auth-token cookie for an issued token."""
    return SessionCookie(
        value=token,
        max_age_seconds=session_max_age(remember_me),
        secure=secure,
    )


def set_session_cookie(response, cookie: SessionCookie) -> None:
    """Write a SessionCookie onto a FastAPI/Starlette response."""
    response.set_cookie(
        cookie.name,
        value=cookie.value,
        max_age=cookie.max_age_seconds,
        path=cookie.path,
        httponly=cookie.http_only,
        secure=cookie.secure,
        samesite=cookie.same_site,
    )


def clear_session_cookie(response, secure: bool = False) -> None:
    """Delete the auth-token cookie. Attributes must match the ones it was set with."""
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def is_session_token_valid(
    token: Optional[str],
    secret: str = "",
    algorithms: Sequence[str] = ("HS256",),
) -> bool:
    """Return True if token proves an existing session.

    Without a secret, any non-empty token counts. With one, the token must
    decode as a JWT signed by that secret and must not be expired. Never
    raises -- an undecodable token is simply not a session.
    """
    if not token:
        return False
    if not secret:
        return True
    try:
        jwt.decode(token, secret, algorithms=list(algorithms))
    except JWTError:
        logger.debug("Ignoring auth-token cookie that failed JWT verification")
        return False
    return True
