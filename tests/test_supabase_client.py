# =============================================================================
# tests/test_supabase_client.py - Supabase Wrapper Tests
# =============================================================================
# Tests SupabaseAuthProvider with a mocked SDK client, plus the error
# formatting helpers. No network calls are made.
# =============================================================================

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from supabase_auth.errors import AuthApiError, AuthRetryableError

from lib.session_storage import SessionCookieStorage
from lib.supabase_client import (
    AuthResult,
    SupabaseAuthError,
    SupabaseAuthProvider,
    SupabaseClientError,
    create_auth_provider,
    is_supabase_configured,
    provider_error_message,
)
from tests.conftest import RecordingCookieAdapter


@pytest.fixture
def storage():
    return SessionCookieStorage(RecordingCookieAdapter())


# =============================================================================
# Helpers
# =============================================================================

class TestProviderErrorMessage:
    """Test error message formatting."""

    def test_error_with_message(self):
        assert provider_error_message(SimpleNamespace(message="Email not confirmed")) == "Email not confirmed"

    def test_string_error(self):
        assert provider_error_message("Invalid login credentials") == "Invalid login credentials"

    @pytest.mark.parametrize("error", [None, ""])
    def test_no_error(self, error):
        assert provider_error_message(error) == "An unknown error occurred"

    def test_unrecognised_error(self):
        assert provider_error_message(SimpleNamespace(code=42)) == "An error occurred while processing your request"


class TestIsConfigured:
    """Test configuration detection."""

    def test_configured(self, make_settings):
        assert is_supabase_configured(make_settings()) is True

    def test_missing_key(self, make_settings):
        assert is_supabase_configured(make_settings(SUPABASE_ANON_KEY=None)) is False


# =============================================================================
# Client Creation
# =============================================================================

class TestCreate:
    """Test SupabaseAuthProvider.create."""

    def test_uses_cookie_storage(self, make_settings, storage):
        """Test the SDK client is built with the request's cookie storage."""
        with patch("lib.supabase_client.create_client") as mock_create:
            provider = create_auth_provider(make_settings(), storage)

        assert isinstance(provider, SupabaseAuthProvider)
        url, key = mock_create.call_args.args
        options = mock_create.call_args.kwargs["options"]
        assert url == "https://test-project.supabase.co"
        assert key == "test-anon-key"
        assert options.storage is storage
        assert options.persist_session is True
        assert options.auto_refresh_token is False

    def test_not_configured(self, make_settings, storage):
        """Test creation refuses to run without credentials."""
        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseAuthProvider.create(make_settings(SUPABASE_URL=None), storage)

        assert exc_info.value.code == "NOT_CONFIGURED"
        assert "SUPABASE_URL" in str(exc_info.value)

    def test_client_init_failure(self, make_settings, storage):
        """Test SDK construction errors are wrapped with a suggestion."""
        with patch("lib.supabase_client.create_client", side_effect=ValueError("Invalid URL")):
            with pytest.raises(SupabaseClientError) as exc_info:
                SupabaseAuthProvider.create(make_settings(), storage)

        assert exc_info.value.code == "CLIENT_INIT_FAILED"
        assert "Invalid URL" in exc_info.value.message


# =============================================================================
# Sign In / Sign Out
# =============================================================================

class TestSignIn:
    """Test sign_in_with_password against a mocked SDK."""

    def test_success(self):
        """Test the user's email and session are returned."""
        client = MagicMock()
        session = SimpleNamespace(access_token="abc")
        client.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=SimpleNamespace(email="judge@example.com"),
            session=session,
        )

        result = SupabaseAuthProvider(client).sign_in_with_password("judge@example.com", "secret")

        assert result == AuthResult(user_email="judge@example.com", session=session)
        assert result.has_session
        client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "judge@example.com", "password": "secret"}
        )

    def test_no_session(self):
        """Test a response without a session is passed through."""
        client = MagicMock()
        client.auth.sign_in_with_password.return_value = SimpleNamespace(user=None, session=None)

        result = SupabaseAuthProvider(client).sign_in_with_password("judge@example.com", "secret")

        assert result.user_email is None
        assert not result.has_session

    def test_rejected(self):
        """Test API errors become SupabaseAuthError with the provider message."""
        client = MagicMock()
        client.auth.sign_in_with_password.side_effect = AuthApiError(
            "Invalid login credentials", 400, "invalid_credentials"
        )

        with pytest.raises(SupabaseAuthError) as exc_info:
            SupabaseAuthProvider(client).sign_in_with_password("judge@example.com", "wrong")

        assert exc_info.value.message == "Invalid login credentials"
        assert str(exc_info.value) == "Invalid login credentials"

    def test_network_failure_propagates(self):
        """Test retryable (network) errors are not mistaken for rejections."""
        client = MagicMock()
        client.auth.sign_in_with_password.side_effect = AuthRetryableError("Connection refused", 0)

        with pytest.raises(AuthRetryableError):
            SupabaseAuthProvider(client).sign_in_with_password("judge@example.com", "secret")


class TestSignOut:
    def test_sign_out_delegates(self):
        client = MagicMock()

        SupabaseAuthProvider(client).sign_out()

        client.auth.sign_out.assert_called_once_with()
