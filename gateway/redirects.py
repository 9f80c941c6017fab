"""
gateway/redirects.py -- The redirect guard shared by the entry and exit steps.

Prevents open redirect attacks where an attacker crafts a login link like:
  /auth/login?redirect=https://attacker.com  or  /auth/login?redirect=//attacker.com

Both would send a freshly authenticated victim off-site. Only paths confined
to our own origin (core.paths.is_safe_path) are accepted; everything else
falls back to the default.
"""

from __future__ import annotations

from typing import Optional

from core.paths import is_safe_path

DEFAULT_REDIRECT = "/dashboard"

__all__ = ["DEFAULT_REDIRECT", "is_safe_path", "resolve_redirect"]


def resolve_redirect(raw: Optional[str], default: str = DEFAULT_REDIRECT) -> str:
    """Return raw if it is a safe same-origin path, otherwise default.

    Pure and deterministic -- no side effects, same answer for the same input.
    """
    if raw and is_safe_path(raw):
        return raw
    return default
