from typing import Any, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel, Field
from pymongo.asynchronous.database import AsyncDatabase

from loggedin.core.core import Service
from loggedin.core.modules.limit.engine import AdmissionPolicy
from loggedin.core.modules.limit.hooks import EvictionNotifier, LimitHooks
from loggedin.core.modules.limit.models import EvictionStrategy, LimitPolicy, LoginLogic
from loggedin.core.modules.limit.options import LimitOption
from loggedin.errors import AuthenticationError, ValidationError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class LimitSettings(BaseModel):
    """Login limit settings (API representation)."""

    logic: LoginLogic = Field(..., description="'block' rejects new logins, 'allow' evicts existing sessions")
    maximum: int = Field(..., description="Maximum number of active sessions per user")
    logout_oldest_session: bool = Field(..., description="Evict only the oldest session instead of all")

    @classmethod
    def from_policy(cls, policy: LimitPolicy) -> "LimitSettings":
        return cls(
            logic=policy.logic or LoginLogic.ALLOW,
            maximum=policy.maximum,
            logout_oldest_session=policy.eviction is EvictionStrategy.OLDEST_FIRST,
        )


class LimitService(Service):
    """Runs the admission checkpoints against the session store and runtime options."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self.hooks = LimitHooks()

    @property
    def admission(self) -> AdmissionPolicy:
        return AdmissionPolicy(self.core.services.session, self.core.options, self.hooks)

    async def check_block(self, user_id: UUID, result: T | AuthenticationError) -> T | AuthenticationError:
        return await self.admission.evaluate_block(user_id, result)

    async def check_allow(self, user_id: UUID, check: bool, notify: EvictionNotifier | None = None) -> bool:
        return await self.admission.evaluate_allow(user_id, check, notify)

    def get_settings(self) -> LimitSettings:
        return LimitSettings.from_policy(LimitPolicy.from_options(self.core.options))

    def update_settings(
        self, logic: LoginLogic | None = None, maximum: int | None = None, logout_oldest_session: bool | None = None
    ) -> LimitSettings:
        """Update login limit options; changes apply to the next login."""
        if maximum is not None and maximum < 1:
            raise ValidationError("Maximum active logins must be at least 1")

        options = self.core.options
        if logic is not None:
            options.set_option(LimitOption.LOGIC, logic.value)
        if maximum is not None:
            options.set_option(LimitOption.MAXIMUM, maximum)
        if logout_oldest_session is not None:
            options.set_option(LimitOption.LOGOUT_OLDEST, logout_oldest_session)

        settings = self.get_settings()
        logger.info("login_limit_updated", **settings.model_dump(mode="json"))
        return settings

    async def on_start(self) -> None:
        logger.debug("limit_service_started", **self.get_settings().model_dump(mode="json"))
