"""Admission decisions for logins of users with a session cap.

The host calls the engine at two checkpoints of its login flow:

- ``evaluate_block`` receives the outcome of the credential check and turns
  a success into a rejection when the limit is reached and the logic is BLOCK.
- ``evaluate_allow`` receives the password check result and, when the logic
  is ALLOW, evicts existing sessions to make room for the new one.

Options are read from the store on every call, so settings changes apply
to the very next login. Count-then-evict is not atomic: concurrent logins
of the same user may both pass the check and exceed the maximum by the
degree of concurrency. Registry failures are logged and treated as "not
reached" or "nothing evicted".
"""

from collections.abc import Mapping
from typing import Any, TypeVar
from uuid import UUID

import structlog

from loggedin.core.modules.limit.hooks import EvictionNotifier, LimitHooks
from loggedin.core.modules.limit.models import EvictionStrategy, LimitPolicy, LoginLogic
from loggedin.core.modules.limit.options import OptionStore
from loggedin.core.modules.limit.registry import SessionRegistry
from loggedin.errors import AuthenticationError, LimitReachedError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_ERROR_MESSAGE = (
    "Maximum no. of active logins found for this account. Please logout from another device to continue."
)
OLDEST_SESSION_NOTICE = (
    "The maximum number of active sessions for your account has been exceeded. "
    "Therefore, your oldest session has been terminated."
)


class AdmissionPolicy:
    """Enforces the maximum number of active sessions per user."""

    def __init__(self, registry: SessionRegistry, options: OptionStore, hooks: LimitHooks | None = None) -> None:
        self.registry = registry
        self.options = options
        self.hooks = hooks or LimitHooks()

    def policy(self) -> LimitPolicy:
        return LimitPolicy.from_options(self.options)

    async def evaluate_block(self, user_id: UUID, result: T | AuthenticationError) -> T | AuthenticationError:
        """Return `result` unless the login must be rejected.

        An earlier failure is returned untouched. Nothing is removed here.
        """
        if isinstance(result, AuthenticationError):
            return result

        if self.policy().logic is not LoginLogic.BLOCK:
            return result

        if await self.reached_limit(user_id):
            logger.info("login_blocked", user_id=user_id)
            return LimitReachedError(self.error_message())

        return result

    async def evaluate_allow(self, user_id: UUID, check: bool, notify: EvictionNotifier | None = None) -> bool:
        """Evict sessions if needed once the password check passed.

        Never rejects a login that passed the password check; returns False
        only when `check` is False.
        """
        if not check:
            return False

        policy = self.policy()
        if policy.logic is not LoginLogic.ALLOW:
            return True

        if await self.reached_limit(user_id):
            if policy.eviction is EvictionStrategy.OLDEST_FIRST:
                await self.logout_oldest_session(user_id, notify)
            else:
                await self.logout_all_sessions(user_id)

        return True

    async def reached_limit(self, user_id: UUID) -> bool:
        if self.bypass(user_id):
            return False

        maximum = self.policy().maximum
        try:
            count = await self.registry.count(user_id)
        except Exception as exc:
            _registry_failed(user_id, "count", exc)
            return False
        reached = count >= maximum

        return bool(self.hooks.reached_limit(reached, user_id, count))

    def bypass(self, user_id: UUID) -> bool:
        return bool(self.hooks.bypass(False, user_id))

    def error_message(self) -> str:
        return self.hooks.error_message(DEFAULT_ERROR_MESSAGE)

    async def logout_all_sessions(self, user_id: UUID) -> None:
        try:
            await self.registry.remove_all(user_id)
        except Exception as exc:
            _registry_failed(user_id, "remove_all", exc)
            return
        logger.info("sessions_evicted", user_id=user_id)

    async def logout_oldest_session(self, user_id: UUID, notify: EvictionNotifier | None = None) -> None:
        """Remove the session with the earliest login, then notify.

        The configured `on_oldest_evicted` hook runs first, the per-call
        `notify` after it.
        """
        try:
            sessions = await self.registry.list_all(user_id)
        except Exception as exc:
            _registry_failed(user_id, "list_all", exc)
            return

        token = find_oldest_token(sessions)
        if token is None:
            logger.warning("no_session_to_evict", user_id=user_id)
            return

        try:
            await self.registry.remove_one(user_id, token)
        except Exception as exc:
            _registry_failed(user_id, "remove_one", exc)
            return

        logger.info("oldest_session_evicted", user_id=user_id, token=token)
        self.hooks.on_oldest_evicted()
        if notify is not None:
            notify()


def _registry_failed(user_id: UUID, operation: str, exc: Exception) -> None:
    # A failing registry makes the calling step a no-op
    logger.warning("session_registry_failed", user_id=user_id, operation=operation, exc_info=exc)


def find_oldest_token(sessions: Any) -> str | None:
    """Return the token with the smallest login timestamp.

    Entries without a usable timestamp are skipped; on a tie the first one
    wins. Returns None for empty or malformed data.
    """
    if not isinstance(sessions, Mapping):
        return None

    oldest_token: str | None = None
    oldest_time: float | None = None
    for token, session in sessions.items():
        login = _login_time(session)
        if login is None or not token:
            continue
        if oldest_time is None or login < oldest_time:
            oldest_token, oldest_time = token, login
    return oldest_token


def _login_time(session: Any) -> float | None:
    login = session.get("login") if isinstance(session, Mapping) else getattr(session, "login", None)
    if isinstance(login, bool) or not isinstance(login, int | float):
        return None
    return login
