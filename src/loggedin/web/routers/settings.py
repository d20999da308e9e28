from fastapi import APIRouter
from pydantic import BaseModel, Field

from loggedin.core.modules.limit.models import LoginLogic
from loggedin.core.modules.limit.service import LimitSettings
from loggedin.web.deps import AppDep, AuthTokenDep
from loggedin.web.openapi import ErrorResponse

router = APIRouter(tags=["settings"])


class UpdateLoginLimitRequest(BaseModel):
    """Partial update of login limit settings; omitted fields are unchanged."""

    logic: LoginLogic | None = Field(None, description="'block' or 'allow'")
    maximum: int | None = Field(None, ge=1, description="Maximum number of active sessions per user")
    logout_oldest_session: bool | None = Field(None, description="Evict only the oldest session in allow mode")


@router.get(
    "/settings/login-limit",
    summary="Get login limit settings",
    description="Get the active login limit settings. Only accessible by admin users.",
    operation_id="getLoginLimit",
    responses={
        200: {"description": "Current settings"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def get_login_limit(app: AppDep, auth_token: AuthTokenDep) -> LimitSettings:
    return await app.get_login_limit(auth_token)


@router.put(
    "/settings/login-limit",
    summary="Update login limit settings",
    description="Update the login limit settings. Changes apply to the next login attempt.",
    operation_id="updateLoginLimit",
    responses={
        200: {"description": "Updated settings"},
        400: {"model": ErrorResponse, "description": "Invalid settings"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def update_login_limit(request: UpdateLoginLimitRequest, app: AppDep, auth_token: AuthTokenDep) -> LimitSettings:
    return await app.update_login_limit(auth_token, request.logic, request.maximum, request.logout_oldest_session)
