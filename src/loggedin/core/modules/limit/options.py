"""Runtime option store for login limit settings."""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Protocol


class LimitOption(StrEnum):
    """Option keys read on every admission check."""

    LOGIC = "loggedin_logic"
    MAXIMUM = "loggedin_maximum"
    LOGOUT_OLDEST = "logout_oldest_session"


class OptionStore(Protocol):
    """Key-value settings source. Missing keys yield the given default."""

    def get_option(self, key: str, default: Any = None) -> Any: ...


class InMemoryOptionStore:
    """Process-wide option store; updates are visible to the next read."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._options: dict[str, Any] = dict(initial or {})

    def get_option(self, key: str, default: Any = None) -> Any:
        return self._options.get(key, default)

    def set_option(self, key: str, value: Any) -> None:
        self._options[key] = value

    def delete_option(self, key: str) -> None:
        self._options.pop(key, None)
