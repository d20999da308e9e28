from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from loggedin.web.deps import AUTH_COOKIE_NAME, AppDep, AuthTokenDep
from loggedin.web.openapi import NO_AUTH, ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    username: str = Field(..., description="Username for authentication")
    password: str = Field(..., description="Password for authentication")


class LoginResponse(BaseModel):
    """Authentication response."""

    token: str = Field(..., description="Authentication token for subsequent requests")
    notices: list[str] = Field(default_factory=list, description="Messages to show after login, e.g. evicted sessions")


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description=(
        "Authenticate with username and password to receive an authentication token. "
        "Depending on the login limit settings, a user with too many active sessions is either "
        "rejected or has existing sessions terminated."
    ),
    operation_id="login",
    openapi_extra=NO_AUTH,
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials or active login limit reached"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> LoginResponse:
    """Authenticate user and create session."""
    result = await app.login(login_data.username, login_data.password)

    # Cookie for browser-based clients
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=result.token,
        httponly=True,
        samesite="lax",
        secure=False,  # Set to True in production with HTTPS
        max_age=app.session_ttl_seconds,
    )

    return LoginResponse(token=result.token, notices=result.notices)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current authentication session.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> None:
    await app.logout(auth_token)
    response.delete_cookie(AUTH_COOKIE_NAME)
