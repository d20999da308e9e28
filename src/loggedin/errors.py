from abc import ABC
from typing import ClassVar


class UserError(ABC, Exception):
    """Error whose message is returned to the API caller as is.

    Each subclass fixes the HTTP status and the machine-readable `type` of
    the JSON error body. Messages must not reveal whether an account exists
    or which sessions it has.
    """

    status_code: ClassVar[int] = 400
    error_type: ClassVar[str] = "bad_request"
    default_message: ClassVar[str] = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class AuthenticationError(UserError):
    """Credentials or session token rejected."""

    status_code = 401
    error_type = "authentication_error"
    default_message = "Authentication failed"


class LimitReachedError(AuthenticationError):
    """Login rejected because the account already has the maximum number of active sessions."""

    error_type = "loggedin_reached_limit"
    default_message = "Maximum number of active logins reached"


class AccessDeniedError(UserError):
    status_code = 403
    error_type = "access_denied"
    default_message = "Access denied"


class NotFoundError(UserError):
    status_code = 404
    error_type = "not_found"
    default_message = "Not found"


class ValidationError(UserError):
    """Input rejected by a validator or a settings update."""

    error_type = "validation_error"
    default_message = "Invalid input"
