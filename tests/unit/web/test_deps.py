"""Tests for request authentication dependencies."""

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from loggedin.errors import AuthenticationError
from loggedin.web.deps import get_auth_token, offered_tokens


class FakeApp:
    """App stub that knows a fixed set of active session tokens."""

    def __init__(self, *active):
        self.active = set(active)

    async def is_auth_token_valid(self, auth_token):
        return auth_token in self.active


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestOfferedTokens:
    """Tests for collecting tokens from the request."""

    def test_bearer_before_cookie(self):
        assert offered_tokens(bearer("header"), "cookie") == ["header", "cookie"]

    def test_nothing_offered(self):
        assert offered_tokens(None, None) == []


class TestGetAuthToken:
    """Tests for token validation."""

    async def test_valid_bearer_token(self):
        assert await get_auth_token(FakeApp("header"), bearer("header"), None) == "header"

    async def test_falls_back_to_cookie(self):
        """Test that a stale bearer token does not hide a valid cookie."""
        assert await get_auth_token(FakeApp("cookie"), bearer("evicted"), "cookie") == "cookie"

    async def test_evicted_session_is_rejected(self):
        with pytest.raises(AuthenticationError):
            await get_auth_token(FakeApp(), bearer("evicted"), "evicted")
