from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from loggedin.errors import AccessDeniedError, AuthenticationError, LimitReachedError, ValidationError
from loggedin.web.deps import AUTH_COOKIE_NAME

# Passed as `openapi_extra` on routes that accept anonymous callers
NO_AUTH: dict[str, Any] = {"security": []}

SECURITY_SCHEMES = {
    "BearerAuth": {"type": "http", "scheme": "bearer", "description": "Session token from the login response"},
    "SessionCookie": {
        "type": "apiKey",
        "in": "cookie",
        "name": AUTH_COOKIE_NAME,
        "description": "Session token set by the login response",
    },
}


def set_custom_openapi(app: FastAPI) -> None:
    """Require a session token on every operation that does not opt out with NO_AUTH."""

    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema is None:
            schema = get_openapi(
                title="LoggedIn API",
                version="0.1.0",
                summary="Login service limiting the number of active sessions per account",
                routes=app.routes,
            )
            schema.setdefault("components", {}).setdefault("securitySchemes", {}).update(SECURITY_SCHEMES)
            schema["security"] = [{name: []} for name in SECURITY_SCHEMES]
            app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": error.default_message, "type": error.error_type}
                for error in (AuthenticationError, LimitReachedError, AccessDeniedError, ValidationError)
            ]
        }
    }
