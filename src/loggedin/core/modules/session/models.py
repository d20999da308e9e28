"""Session management models."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import BaseModel, Field

from loggedin.core.db import MongoModel
from loggedin.core.modules.limit.models import SessionRecord
from loggedin.utils import now, to_timestamp

AuthToken = NewType("AuthToken", str)


class Session(MongoModel):
    """User authentication session.

    Indexed on auth_token - unique, user_id, expires_at (TTL).
    """

    user_id: UUID
    auth_token: str
    created_at: datetime = Field(default_factory=now)
    last_activity_at: datetime = Field(default_factory=now)
    expires_at: datetime

    def is_expired(self) -> bool:
        return self.expires_at <= now()

    def to_record(self) -> SessionRecord:
        """Timestamps-only view used by the admission engine."""
        return SessionRecord(
            login=to_timestamp(self.created_at),
            last_activity=to_timestamp(self.last_activity_at),
            expiration=to_timestamp(self.expires_at),
        )


class SessionView(BaseModel):
    """Active session information (API representation)."""

    token_hint: str = Field(..., description="First characters of the session token")
    created_at: datetime = Field(..., description="Login time")
    last_activity_at: datetime = Field(..., description="Last time the session was used")
    expires_at: datetime = Field(..., description="Expiration time")
    current: bool = Field(..., description="Whether this is the session making the request")

    @classmethod
    def from_domain(cls, session: Session, current_token: str | None = None) -> "SessionView":
        return cls(
            token_hint=session.auth_token[:8],
            created_at=session.created_at,
            last_activity_at=session.last_activity_at,
            expires_at=session.expires_at,
            current=session.auth_token == current_token,
        )


class LoginResult(BaseModel):
    """Outcome of a successful login."""

    token: AuthToken
    notices: list[str] = Field(default_factory=list)
