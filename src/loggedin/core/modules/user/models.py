from typing import Self
from uuid import UUID

from pydantic import BaseModel, Field

from loggedin.core.db import MongoModel


class User(MongoModel):
    """Account whose logins are subject to the active session limit."""

    username: str
    password_hash: str  # bcrypt
    is_admin: bool = False  # may read and change the login limit settings


class ProfileView(BaseModel):
    """Current user with the number of sessions counted against the limit (API representation)."""

    id: UUID = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    is_admin: bool = Field(..., description="Whether the user can change the login limit settings")
    active_sessions: int = Field(..., description="Number of active sessions, including the current one")

    @classmethod
    def from_domain(cls, user: User, active_sessions: int) -> Self:
        return cls(id=user.id, username=user.username, is_admin=user.is_admin, active_sessions=active_sessions)
