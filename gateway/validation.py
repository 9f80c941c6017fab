"""
gateway/validation.py -- Credential extraction and field validation.

Both functions are pure: the same input always yields the same output, and
nothing here performs I/O or logging. Rules are evaluated independently so a
single submission reports every field error at once.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional

from gateway.models import LoginRequest

# local@domain.tld -- non-whitespace on both sides of one "@", a "." after it.
# Always applied with fullmatch(): "$" would accept a trailing "\n".
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_PASSWORD_LENGTH = 8


def extract_credentials(form: Optional[Mapping[str, Any]]) -> LoginRequest:
    """Build a LoginRequest from a form-encoded submission.

    Missing fields become empty strings so validation reports them as
    required. rememberMe is true only for the literal checkbox value "on".
    """
    form = form or {}
    email = form.get("email")
    password = form.get("password")
    return LoginRequest(
        email="" if email is None else str(email),
        password="" if password is None else str(password),
        remember_me=form.get("rememberMe") == "on",
    )


def validate_credentials(login: LoginRequest) -> dict[str, str]:
    """Return field -> message for every violated rule; empty dict means valid.

    Key order is always email before password.

    Password length counts Unicode code points, so a character outside the
    BMP (e.g. an emoji) counts once, not as two UTF-16 units.
    """
    errors: dict[str, str] = {}

    if not login.email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.fullmatch(login.email):
        errors["email"] = "Please enter a valid email address"

    if not login.password:
        errors["password"] = "Password is required"
    elif len(login.password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    return errors
