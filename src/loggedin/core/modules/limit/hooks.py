"""Extension points for the admission engine.

Each hook is a plain callable with a passthrough default, so hosts can
layer custom rules (role exemptions, per-role limits, translated messages)
without touching the engine.
"""

from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import TypeAlias
from uuid import UUID

# (current bypass value, user id) -> bypass
BypassHook: TypeAlias = Callable[[bool, UUID], bool]
# (reached, user id, active session count) -> reached
ReachedLimitHook: TypeAlias = Callable[[bool, UUID, int], bool]
# (default message) -> message
ErrorMessageHook: TypeAlias = Callable[[str], str]
# Called after an oldest-session eviction, before the login check returns
EvictionNotifier: TypeAlias = Callable[[], None]


def keep_bypass(current: bool, _user_id: UUID) -> bool:
    return current


def keep_reached(reached: bool, _user_id: UUID, _count: int) -> bool:
    return reached


def keep_message(message: str) -> str:
    return message


def ignore_eviction() -> None:
    return None


@dataclass
class LimitHooks:
    bypass: BypassHook = keep_bypass
    reached_limit: ReachedLimitHook = keep_reached
    error_message: ErrorMessageHook = keep_message
    on_oldest_evicted: EvictionNotifier = ignore_eviction


def bypass_users(user_ids: Collection[UUID]) -> BypassHook:
    """Build a bypass hook exempting the given accounts from the limit."""
    exempt = frozenset(user_ids)

    def bypass(current: bool, user_id: UUID) -> bool:
        return current or user_id in exempt

    return bypass
