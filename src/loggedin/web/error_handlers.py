import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from loggedin.errors import UserError

logger = structlog.get_logger(__name__)


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


def classify_user_error(exc: Exception) -> tuple[int, str]:
    """Map an error to its HTTP status code and machine-readable type."""
    if isinstance(exc, UserError):
        return exc.status_code, exc.error_type
    return 400, "bad_request"


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    status_code, error_type = classify_user_error(exc)
    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.error("unexpected_error", exc_info=exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
