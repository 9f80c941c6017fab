"""
API request and response models for the login gateway HTTP surface.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in gateway/models.py, which own
the internal representation. Route handlers map between the two.

Separation of concerns: gateway/ models = domain truth; api/ models = HTTP contract.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gateway.models import LoginFailure

# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


class LoginFailureResponse(BaseModel):
    """Body returned with 400/500 when a login submission fails.

    Field names on the wire are camelCase (rememberMe, fieldErrors) to match
    the form field names the login page submits. fieldErrors is omitted
    unless the failure is a field validation one. The password is never
    echoed back.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email: str
    remember_me: bool = Field(alias="rememberMe")
    field_errors: Optional[dict[str, str]] = Field(default=None, alias="fieldErrors")
    error: str

    @classmethod
    def from_failure(cls, failure: LoginFailure) -> "LoginFailureResponse":
        """Build the wire payload from a gateway LoginFailure."""
        return cls(
            email=failure.email,
            remember_me=failure.remember_me,
            field_errors=failure.field_errors,
            error=failure.error,
        )

    def to_content(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Errors / health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses outside the login flow."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
