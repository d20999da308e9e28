from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

from loggedin.config import Config
from loggedin.core.core import Core
from loggedin.core.modules.limit.engine import OLDEST_SESSION_NOTICE
from loggedin.core.modules.limit.models import LoginLogic
from loggedin.core.modules.limit.service import LimitSettings
from loggedin.core.modules.session.models import AuthToken, LoginResult, SessionView
from loggedin.core.modules.user.models import ProfileView, User
from loggedin.errors import AccessDeniedError, AuthenticationError

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    @property
    def session_ttl_seconds(self) -> int:
        return self._core.config.session_ttl_days * 24 * 60 * 60

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        return await self._core.services.session.is_auth_token_valid(auth_token)

    async def login(self, username: str, password: str) -> LoginResult:
        """Authenticate user, enforce the active login limit, and create a session.

        The limit is checked twice: the block checkpoint may reject the login,
        the allow checkpoint may evict existing sessions of the user.
        """
        services = self._core.services
        user = services.user.find_user_by_username(username)
        if user is None:
            raise AuthenticationError

        password_ok = services.user.verify_password(user.id, password)
        result = await services.limit.check_block(user.id, user if password_ok else AuthenticationError())
        if isinstance(result, AuthenticationError):
            logger.info("login_rejected", username=username, reason=type(result).__name__)
            raise result

        notices: list[str] = []
        allowed = await services.limit.check_allow(
            user.id, password_ok, notify=lambda: notices.append(OLDEST_SESSION_NOTICE)
        )
        if not allowed:
            raise AuthenticationError

        token = await services.session.create_session(user.id)
        logger.info("login_succeeded", username=username)
        return LoginResult(token=token, notices=notices)

    async def logout(self, auth_token: AuthToken) -> None:
        """Invalidate user session."""
        await self._authenticate(auth_token)
        await self._core.services.session.invalidate_session(auth_token)

    async def get_current_user(self, auth_token: AuthToken) -> ProfileView:
        current_user = await self._authenticate(auth_token)
        active_sessions = await self._core.services.session.count(current_user.id)
        return ProfileView.from_domain(current_user, active_sessions)

    async def change_password(self, auth_token: AuthToken, old_password: str, new_password: str) -> None:
        current_user = await self._authenticate(auth_token)
        await self._core.services.user.change_password(current_user.id, old_password, new_password)

    async def get_my_sessions(self, auth_token: AuthToken) -> list[SessionView]:
        """Get active sessions of the current user, oldest first."""
        current_user = await self._authenticate(auth_token)
        sessions = await self._core.services.session.get_user_sessions(current_user.id)
        return [SessionView.from_domain(session, auth_token) for session in sessions]

    async def get_login_limit(self, auth_token: AuthToken) -> LimitSettings:
        """Get login limit settings (admin only)."""
        await self._ensure_admin(auth_token)
        return self._core.services.limit.get_settings()

    async def update_login_limit(
        self,
        auth_token: AuthToken,
        logic: LoginLogic | None,
        maximum: int | None,
        logout_oldest_session: bool | None,
    ) -> LimitSettings:
        """Update login limit settings (admin only), effective for the next login."""
        await self._ensure_admin(auth_token)
        return self._core.services.limit.update_settings(logic, maximum, logout_oldest_session)

    async def _authenticate(self, auth_token: AuthToken) -> User:
        return await self._core.services.session.get_authenticated_user(auth_token)

    async def _ensure_admin(self, auth_token: AuthToken) -> User:
        user = await self._authenticate(auth_token)
        if not user.is_admin:
            raise AccessDeniedError("Admin privileges required")
        return user
