"""Shared pytest fixtures."""

from uuid import UUID

import bcrypt
import pytest

from loggedin.core.modules.limit.engine import AdmissionPolicy
from loggedin.core.modules.limit.hooks import LimitHooks
from loggedin.core.modules.limit.options import InMemoryOptionStore, LimitOption
from loggedin.core.modules.limit.registry import InMemorySessionRegistry
from loggedin.core.modules.user.models import User

TEST_PASSWORD = "secret-pass"


@pytest.fixture
def mock_user():
    """Create a mock user for testing."""
    return User(
        id=UUID("87654321-4321-8765-4321-876543218765"),
        username="testuser",
        password_hash=bcrypt.hashpw(TEST_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8"),
    )


@pytest.fixture
def user_id(mock_user):
    return mock_user.id


@pytest.fixture
def registry():
    return InMemorySessionRegistry()


@pytest.fixture
def options():
    """Option store with the stock defaults: allow logic, one session, evict all."""
    return InMemoryOptionStore(
        {
            LimitOption.LOGIC: "allow",
            LimitOption.MAXIMUM: 1,
            LimitOption.LOGOUT_OLDEST: False,
        }
    )


@pytest.fixture
def hooks():
    return LimitHooks()


@pytest.fixture
def admission(registry, options, hooks):
    return AdmissionPolicy(registry, options, hooks)


@pytest.fixture
def test_password():
    return TEST_PASSWORD
