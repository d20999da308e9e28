"""Tests for the login limit service."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from loggedin.core.modules.limit.models import LoginLogic
from loggedin.core.modules.limit.options import LimitOption
from loggedin.core.modules.limit.service import LimitService
from loggedin.errors import LimitReachedError, ValidationError


@pytest.fixture
def service(registry, options):
    limit_service = LimitService(MagicMock())
    limit_service.set_core(SimpleNamespace(options=options, services=SimpleNamespace(session=registry)))
    return limit_service


class TestLimitSettings:
    """Tests for reading and updating settings."""

    def test_get_settings(self, service):
        settings = service.get_settings()

        assert settings.logic is LoginLogic.ALLOW
        assert settings.maximum == 1
        assert settings.logout_oldest_session is False

    def test_update_settings(self, service, options):
        settings = service.update_settings(LoginLogic.BLOCK, 3, True)

        assert settings.logic is LoginLogic.BLOCK
        assert settings.maximum == 3
        assert settings.logout_oldest_session is True
        assert options.get_option(LimitOption.LOGIC) == "block"

    def test_partial_update_keeps_other_values(self, service):
        service.update_settings(maximum=4)
        settings = service.update_settings(logout_oldest_session=True)

        assert settings.maximum == 4
        assert settings.logic is LoginLogic.ALLOW

    def test_maximum_below_one_rejected(self, service):
        with pytest.raises(ValidationError, match="at least 1"):
            service.update_settings(maximum=0)

    def test_unknown_stored_logic_reported_as_allow(self, service, options):
        options.set_option(LimitOption.LOGIC, "bogus")
        assert service.get_settings().logic is LoginLogic.ALLOW


class TestCheckpoints:
    """Tests that the service runs checkpoints against the current core state."""

    async def test_update_applies_to_next_check(self, service, registry, user_id):
        registry.add(user_id)
        assert await service.check_block(user_id, "user") == "user"

        service.update_settings(logic=LoginLogic.BLOCK)

        assert isinstance(await service.check_block(user_id, "user"), LimitReachedError)

    async def test_installed_hooks_are_used(self, service, registry, user_id):
        registry.add(user_id, "a", login=1)
        service.update_settings(logout_oldest_session=True)
        evicted = []
        service.hooks.on_oldest_evicted = lambda: evicted.append(True)

        assert await service.check_allow(user_id, True) is True
        assert evicted == [True]
        assert await registry.count(user_id) == 0
