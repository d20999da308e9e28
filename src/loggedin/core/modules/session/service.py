import secrets
from datetime import timedelta
from typing import Any
from uuid import UUID

import pydantic
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from loggedin.core.core import Service
from loggedin.core.modules.limit.models import SessionSet
from loggedin.core.modules.session.models import AuthToken, Session
from loggedin.core.modules.user.models import User
from loggedin.errors import AuthenticationError
from loggedin.utils import now

logger = structlog.get_logger(__name__)

# last_activity_at is written at most this often per session
ACTIVITY_INTERVAL = timedelta(minutes=5)


class SessionService(Service):
    """Stores user sessions and serves as the session registry for the login limit.

    Sessions are always read from the database so that evictions made by
    any process take effect on the next request.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("user_id", 1)])
        # MongoDB removes documents once expires_at has passed
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def create_session(self, user_id: UUID) -> AuthToken:
        auth_token = AuthToken(secrets.token_urlsafe(32))
        created_at = now()
        new_session = Session(
            user_id=user_id,
            auth_token=auth_token,
            created_at=created_at,
            last_activity_at=created_at,
            expires_at=created_at + timedelta(days=self.core.config.session_ttl_days),
        )
        await self._collection.insert_one(new_session.to_mongo())
        logger.debug("session_created", user_id=user_id)
        return auth_token

    async def get_session(self, auth_token: AuthToken) -> Session:
        doc = await self._collection.find_one({"auth_token": auth_token})
        if doc is None:
            raise AuthenticationError("Invalid or expired session")
        session = Session.model_validate(doc)

        if session.is_expired():
            await self.invalidate_session(auth_token)
            raise AuthenticationError("Invalid or expired session")

        if now() - session.last_activity_at >= ACTIVITY_INTERVAL:
            session = session.model_copy(update={"last_activity_at": now()})
            await self._collection.update_one(
                {"auth_token": auth_token}, {"$set": {"last_activity_at": session.last_activity_at}}
            )

        return session

    async def get_authenticated_user(self, auth_token: AuthToken) -> User:
        session = await self.get_session(auth_token)
        if not self.core.services.user.has_user(session.user_id):
            raise AuthenticationError("Invalid or expired session")
        return self.core.services.user.get_user(session.user_id)

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_authenticated_user(auth_token)
        except AuthenticationError:
            return False
        return True

    async def get_user_sessions(self, user_id: UUID) -> list[Session]:
        """Get active sessions of a user, oldest first."""
        cursor = self._collection.find({"user_id": user_id, "expires_at": {"$gt": now()}}).sort("created_at", 1)
        return await Session.list_cursor(cursor)

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the database."""
        await self._collection.delete_one({"auth_token": auth_token})

    # Session registry

    async def count(self, user_id: UUID) -> int:
        return await self._collection.count_documents({"user_id": user_id, "expires_at": {"$gt": now()}})

    async def list_all(self, user_id: UUID) -> SessionSet:
        sessions: SessionSet = {}
        async for doc in self._collection.find({"user_id": user_id, "expires_at": {"$gt": now()}}):
            try:
                session = Session.model_validate(doc)
            except pydantic.ValidationError:
                logger.warning("malformed_session_skipped", user_id=user_id, session_id=doc.get("_id"))
                continue
            sessions[session.auth_token] = session.to_record()
        return sessions

    async def remove_one(self, user_id: UUID, token: str) -> None:
        await self._collection.delete_one({"user_id": user_id, "auth_token": token})

    async def remove_all(self, user_id: UUID) -> None:
        result = await self._collection.delete_many({"user_id": user_id})
        logger.debug("user_sessions_removed", user_id=user_id, count=result.deleted_count)
