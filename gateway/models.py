"""
gateway/models.py -- Domain dataclasses for one login request.

Pattern: Data class (pure data container, zero logic). The gateway steps in
gateway/flow.py do the work; these types only carry what flows between them.

Every step of the gateway returns one of three tagged outcomes:
  Continue -- proceed to the next step, optionally carrying a value
  Redirect -- terminal; the transport answers with an HTTP redirect
  Fail     -- terminal; the transport answers with a LoginFailure payload

The caller inspects the tag with isinstance() instead of relying on
exceptions for control flow.

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

SESSION_COOKIE_NAME = "auth-token"
CSRF_COOKIE_NAME = "XSRF-TOKEN"
CSRF_HEADER_NAME = "X-CSRF-Token"

REMEMBER_ME_MAX_AGE = 60 * 60 * 24 * 30  # 30 days
DEFAULT_MAX_AGE = 60 * 60 * 24  # 1 day

MSG_FIX_ERRORS = "Please correct the errors below"
MSG_INVALID_CREDENTIALS = "Invalid email or password"
MSG_UNEXPECTED = "An unexpected error occurred. Please try again."


@dataclass
class LoginRequest:
    """One form submission. Transient -- discarded when the request ends.

    repr=False on password keeps it out of logs and tracebacks that format
    the dataclass.
    """

    email: str
    password: str = field(repr=False)
    remember_me: bool = False


# ---------------------------------------------------------------------------
# Authentication exchange result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuthSuccess:
    token: str = field(repr=False)


@dataclass(frozen=True)
class AuthFailure:
    status_code: int  # backend's HTTP status, kept for logging
    message: str


AuthResult = Union[AuthSuccess, AuthFailure]


# ---------------------------------------------------------------------------
# Session cookie
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SessionCookie:
    value: str = field(repr=False)
    max_age_seconds: int
    secure: bool
    name: str = SESSION_COOKIE_NAME
    path: str = "/"
    http_only: bool = True
    same_site: str = "lax"


# ---------------------------------------------------------------------------
# Failure payload
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoginFailure:
    """What the caller needs to redisplay the form.

    kind is one of "field_validation", "invalid_credentials", "transport_error".
    The submitted password is never part of this payload.
    """

    kind: str
    error: str
    email: str
    remember_me: bool
    field_errors: Optional[dict[str, str]] = None


# ---------------------------------------------------------------------------
# Step outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Continue:
    value: Any = None


@dataclass(frozen=True)
class Redirect:
    location: str
    status_code: int = 302


@dataclass(frozen=True)
class Fail:
    status_code: int
    failure: LoginFailure


Outcome = Union[Continue, Redirect, Fail]
