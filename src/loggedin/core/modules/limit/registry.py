"""Session registry contract consumed by the admission engine."""

import secrets
from typing import Protocol
from uuid import UUID

from loggedin.core.modules.limit.models import SessionRecord, SessionSet
from loggedin.utils import now, to_timestamp


class SessionRegistry(Protocol):
    """Read and remove access to a user's active sessions."""

    async def count(self, user_id: UUID) -> int: ...

    async def list_all(self, user_id: UUID) -> SessionSet: ...

    async def remove_one(self, user_id: UUID, token: str) -> None: ...

    async def remove_all(self, user_id: UUID) -> None: ...


class InMemorySessionRegistry:
    """Dict-backed registry for tests and embedding without MongoDB."""

    def __init__(self) -> None:
        self._sessions: dict[UUID, SessionSet] = {}

    def add(self, user_id: UUID, token: str | None = None, login: int | None = None) -> str:
        """Register a session and return its token."""
        token = token or secrets.token_urlsafe(32)
        login = to_timestamp(now()) if login is None else login
        self._sessions.setdefault(user_id, {})[token] = SessionRecord(login=login, last_activity=login)
        return token

    def tokens(self, user_id: UUID) -> set[str]:
        return set(self._sessions.get(user_id, {}))

    async def count(self, user_id: UUID) -> int:
        return len(self._sessions.get(user_id, {}))

    async def list_all(self, user_id: UUID) -> SessionSet:
        return dict(self._sessions.get(user_id, {}))

    async def remove_one(self, user_id: UUID, token: str) -> None:
        self._sessions.get(user_id, {}).pop(token, None)

    async def remove_all(self, user_id: UUID) -> None:
        self._sessions.pop(user_id, None)
