from typing import Any

from pydantic_settings import BaseSettings

from loggedin.core.modules.limit.options import LimitOption


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    admin_password: str = "admin"  # Password of the admin account created on first start
    cors_origins: list[str] = []
    session_ttl_days: int = 30  # Sessions expire this many days after login
    # Initial login limit options, editable at runtime via the settings API
    login_logic: str = "allow"  # "block" rejects new logins, "allow" evicts old sessions
    login_maximum: int = 1  # Maximum number of active sessions per user
    logout_oldest_session: bool = False  # Evict only the oldest session instead of all of them

    model_config = {
        "env_file": [".env"],
        "env_prefix": "LOGGEDIN_",
        "extra": "ignore",
    }

    def limit_options(self) -> dict[str, Any]:
        """Initial values for the runtime option store."""
        return {
            LimitOption.LOGIC: self.login_logic,
            LimitOption.MAXIMUM: self.login_maximum,
            LimitOption.LOGOUT_OLDEST: self.logout_oldest_session,
        }
