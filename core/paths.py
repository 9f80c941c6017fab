"""
core/paths.py -- Same-origin path check shared by config and the redirect guard.

core/config.py validates DEFAULT_REDIRECT with it at startup; gateway/redirects.py
applies it to every untrusted ?redirect= value. One rule for both, so a
configured default can never be looser than a user-supplied target.

Layer rule: core/ is the kernel. No imports from api/, web/, or gateway/.
"""

from __future__ import annotations

from urllib.parse import urlsplit


def is_safe_path(target: str) -> bool:
    """Return True if target is a path on this origin.

    Rejected:
    - anything not starting with "/" (absolute URLs, "javascript:", relative)
    - "//host" -- protocol-relative, browsers resolve it off-site
    - any backslash -- browsers normalize "/\\host" to "//host"
    - control characters and whitespace -- browsers strip tab/CR/LF, so
      "/\\t/host" would collapse into "//host"
    - anything urlsplit() sees a scheme or host in
    """
    if not target or not target.startswith("/") or target.startswith("//"):
        return False
    if "\\" in target:
        return False
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in target):
        return False
    parts = urlsplit(target)
    return not parts.scheme and not parts.netloc
