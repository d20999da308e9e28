"""Login limit policy and session snapshot models."""

import re
from enum import StrEnum
from typing import Any, Self, TypeAlias

import structlog
from pydantic import BaseModel, Field

from loggedin.core.modules.limit.options import LimitOption, OptionStore

logger = structlog.get_logger(__name__)

DEFAULT_MAXIMUM = 1

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class LoginLogic(StrEnum):
    """What happens when a user with too many sessions logs in.

    - BLOCK: the new login is rejected
    - ALLOW: the new login succeeds and existing sessions are evicted
    """

    BLOCK = "block"
    ALLOW = "allow"


class EvictionStrategy(StrEnum):
    """Which sessions are removed in allow mode."""

    OLDEST_FIRST = "oldest_first"
    ALL = "all"


class SessionRecord(BaseModel):
    """One active session as seen by the admission engine. Timestamps are epoch seconds."""

    login: int
    last_activity: int | None = None
    expiration: int | None = None


# Token -> session, scoped to one user
SessionSet: TypeAlias = dict[str, SessionRecord]


class LimitPolicy(BaseModel):
    """Snapshot of the login limit options, built fresh for each check."""

    logic: LoginLogic | None = Field(LoginLogic.ALLOW, description="None when the stored value is unknown")
    maximum: int = DEFAULT_MAXIMUM
    eviction: EvictionStrategy = EvictionStrategy.ALL

    @classmethod
    def from_options(cls, options: OptionStore) -> Self:
        return cls(
            logic=parse_logic(options.get_option(LimitOption.LOGIC, LoginLogic.ALLOW.value)),
            maximum=parse_maximum(options.get_option(LimitOption.MAXIMUM, DEFAULT_MAXIMUM)),
            eviction=(
                EvictionStrategy.OLDEST_FIRST
                if parse_flag(options.get_option(LimitOption.LOGOUT_OLDEST, False))
                else EvictionStrategy.ALL
            ),
        )


def parse_logic(value: Any) -> LoginLogic | None:
    """Map a stored logic value to LoginLogic.

    Only the exact names "block" and "allow" are recognized. Anything else,
    including different case or surrounding whitespace, disables both
    checkpoints.
    """
    try:
        return LoginLogic(value)
    except (TypeError, ValueError):
        logger.warning("unknown_login_logic", value=value)
        return None


def parse_maximum(value: Any) -> int:
    """Coerce a stored maximum to int the way a lenient integer cast does.

    Strings yield their leading integer ("3 sessions" is 3, "2.5" is 2) or 0
    when they have none. Zero and negative values are kept as is: every
    login then reaches the limit. An unset (None) or unusable value falls
    back to the default.
    """
    if value is None:
        return DEFAULT_MAXIMUM
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            logger.warning("invalid_login_maximum", value=value, parsed=0)
            return 0
        return int(match.group(1))
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("invalid_login_maximum", value=value, fallback=DEFAULT_MAXIMUM)
        return DEFAULT_MAXIMUM


def parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
