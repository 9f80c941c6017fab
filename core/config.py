"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the login gateway happen here. No module
should call os.getenv() or os.environ.get() directly -- import get_settings()
instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. auth_backend_url -> AUTH_BACKEND_URL). Type coercion and validation
      are built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. A missing or malformed backend URL is a
      startup failure, never a per-request one.

Security notes:
  [S1] The auth-token cookie is only marked Secure when ENVIRONMENT=production.
       The gateway receives this as an explicit flag (GatewayConfig) and never
       reads the environment itself.

  [S2] DEFAULT_REDIRECT is validated with core.paths.is_safe_path, the same
       check applied to the untrusted ?redirect= parameter, so a misconfigured
       default cannot become an open redirect.

Layer rule: core/ is the kernel. This module may not import from api/, web/,
or gateway/.
"""

import logging
from functools import lru_cache
from typing import Literal
from urllib.parse import urlsplit

from pydantic import ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.paths import is_safe_path

logger = logging.getLogger("loginportal.config")


class ConfigurationError(Exception):
    """Raised at startup when the settings cannot produce a working gateway."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Every field except auth_backend_url has a default. The model_validator
    enforces the startup rules; get_settings() converts its failures into
    ConfigurationError.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------

    environment: Literal["development", "staging", "production"] = "development"
    allowed_hosts: list[str] = ["localhost", "127.0.0.1", "*.localhost"]

    # ------------------------------------------------------------------
    # Authentication backend
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured" -- rejected below.
    auth_backend_url: str = ""
    auth_backend_timeout: float = 10.0

    # ------------------------------------------------------------------
    # Gateway behaviour
    # ------------------------------------------------------------------

    default_redirect: str = "/dashboard"
    pass_through_backend_message: bool = True

    # Optional JWT verification of an existing auth-token cookie. Empty means
    # any non-empty cookie counts as a session.
    session_token_secret: str = ""
    session_token_algorithms: list[str] = ["HS256"]

    # ------------------------------------------------------------------
    # Rate limiting
    # ------------------------------------------------------------------

    login_rate_limit: str = "10/minute"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_gateway_settings(self) -> "Settings":
        """Reject settings that would leave the gateway unusable.

        AUTH_BACKEND_URL must be an absolute http(s) URL. A trailing slash is
        stripped so endpoint paths can be appended without doubling it.

        DEFAULT_REDIRECT must be a same-origin path [S2].
        """
        if not self.auth_backend_url:
            raise ValueError("AUTH_BACKEND_URL is required. Set it in your environment or .env file.")
        parts = urlsplit(self.auth_backend_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"AUTH_BACKEND_URL must be an http(s) URL, got {self.auth_backend_url!r}")
        self.auth_backend_url = self.auth_backend_url.rstrip("/")

        if self.auth_backend_timeout <= 0:
            raise ValueError("AUTH_BACKEND_TIMEOUT must be positive.")

        if not is_safe_path(self.default_redirect):
            raise ValueError(f"DEFAULT_REDIRECT must be a same-origin path, got {self.default_redirect!r}")

        if self.environment == "production" and self.auth_backend_url.startswith("http://"):
            logger.warning("AUTH_BACKEND_URL uses plain http in production -- credentials travel unencrypted")
        return self

    @property
    def secure_cookies(self) -> bool:
        """True only in the production deployment mode [S1]."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    Uses lru_cache so Settings() is instantiated exactly once -- at first call.
    All modules should call get_settings() rather than constructing Settings()
    directly.

    Raises:
        ConfigurationError: If any setting fails validation. This is fatal at
            startup; it never surfaces on a request path.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
