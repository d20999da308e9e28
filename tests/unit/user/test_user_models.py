"""Tests for user models."""

from loggedin.core.modules.user.models import ProfileView


class TestProfileView:
    """Tests for the profile representation."""

    def test_from_domain(self, mock_user):
        view = ProfileView.from_domain(mock_user, active_sessions=2)

        assert view.id == mock_user.id
        assert view.username == "testuser"
        assert view.is_admin is False
        assert view.active_sessions == 2

    def test_password_hash_not_exposed(self, mock_user):
        assert "password_hash" not in ProfileView.from_domain(mock_user, 0).model_dump()
