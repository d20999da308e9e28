from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from loggedin.core.core import Service
from loggedin.core.modules.user.models import User
from loggedin.core.modules.user.validators import MAX_PASSWORD_LENGTH, validate_password, validate_username
from loggedin.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """Return False for passwords longer than bcrypt accepts instead of raising."""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > MAX_PASSWORD_LENGTH:
        return False
    return bcrypt.checkpw(password_bytes, password_hash.encode("utf-8"))


class UserService(Service):
    """Manages users with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        self._users: dict[UUID, User] = {}

    def get_user(self, user_id: UUID) -> User:
        """Get user by ID from cache."""
        if user_id not in self._users:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]

    def find_user_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def has_user(self, user_id: UUID) -> bool:
        return user_id in self._users

    def has_username(self, username: str) -> bool:
        return self.find_user_by_username(username) is not None

    async def create_user(self, username: str, password: str, is_admin: bool = False) -> User:
        """Create user with hashed password."""
        validate_username(username)
        if self.has_username(username):
            raise ValidationError(f"User '{username}' already exists")

        validate_password(password)
        user = User(username=username, password_hash=hash_password(password), is_admin=is_admin)
        res = await self._collection.insert_one(user.to_mongo())
        logger.info("user_created", username=username, is_admin=is_admin)
        return await self.update_user_cache(res.inserted_id)

    def verify_password(self, user_id: UUID, password: str) -> bool:
        """Verify password against the stored hash of an existing user."""
        return check_password(password, self.get_user(user_id).password_hash)

    async def change_password(self, user_id: UUID, old_password: str, new_password: str) -> None:
        """Change user password after verifying current password."""
        if not self.verify_password(user_id, old_password):
            raise ValidationError("Invalid current password")

        validate_password(new_password)
        await self._collection.update_one({"_id": user_id}, {"$set": {"password_hash": hash_password(new_password)}})
        await self.update_user_cache(user_id)

    async def ensure_admin_user_exists(self) -> None:
        """Create default admin user if not exists."""
        if not self.has_username("admin"):
            await self.create_user("admin", self.core.config.admin_password, is_admin=True)

    async def update_all_users_cache(self) -> None:
        """Reload all users cache from database."""
        users = await User.list_cursor(self._collection.find())
        self._users = {user.id: user for user in users}

    async def update_user_cache(self, user_id: UUID) -> User:
        """Reload a specific user cache from database."""
        user = await self._collection.find_one({"_id": user_id})
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        self._users[user_id] = User.model_validate(user)
        return self._users[user_id]

    async def on_start(self) -> None:
        """Initialize indexes, cache, and admin user."""
        await self._collection.create_index([("username", 1)], unique=True)
        await self.update_all_users_cache()
        await self.ensure_admin_user_exists()
        logger.debug("user_service_started", user_count=len(self._users))
