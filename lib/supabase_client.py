# =============================================================================
# lib/supabase_client.py - Supabase Auth Client Wrapper
# =============================================================================
# This module wraps the Supabase auth client for server-side use.
#
# Unlike a shared singleton, a client is created per request: its session
# storage is the request's cookies (see lib/session_storage.py), so session
# tokens never outlive the request/response cycle.
#
# Usage:
#   storage = SessionCookieStorage(adapter, request.headers.get("cookie"))
#   provider = SupabaseAuthProvider.create(settings, storage)
#   result = provider.sign_in_with_password(email, password)
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from supabase import Client, ClientOptions, create_client
from supabase_auth.errors import AuthApiError, AuthRetryableError

from app.config import Settings
from lib.session_storage import SessionCookieStorage

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: what failed and how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseAuthError(SupabaseClientError):
    """Supabase answered and rejected the request (e.g. bad credentials)."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(
            message=message,
            code="AUTH_REJECTED",
            details={"status": status} if status is not None else None,
        )

    def __str__(self) -> str:
        return self.message


@dataclass
class AuthResult:
    """Outcome of a successful password sign-in."""
    user_email: Optional[str]
    session: Optional[Any]

    @property
    def has_session(self) -> bool:
        return self.session is not None


class AuthProvider(Protocol):
    """What the auth routes need from an identity provider."""

    def sign_in_with_password(self, email: str, password: str) -> AuthResult: ...

    def sign_out(self) -> None: ...


# Builds a provider bound to one request's cookie storage
AuthProviderFactory = Callable[[Settings, SessionCookieStorage], AuthProvider]


def is_supabase_configured(settings: Settings) -> bool:
    """Check if Supabase is properly configured."""
    return settings.is_supabase_configured


def provider_error_message(error: Any) -> str:
    """
    Format a Supabase error for display.

    Args:
        error: Error object, string, or None

    Returns:
        User-friendly error message
    """
    if not error:
        return "An unknown error occurred"
    message = getattr(error, "message", None)
    if message:
        return str(message)
    if isinstance(error, str):
        return error
    return "An error occurred while processing your request"


class SupabaseAuthProvider:
    """
    Supabase Auth operations for a single request.

    Example:
        provider = SupabaseAuthProvider.create(settings, storage)
        result = provider.sign_in_with_password("judge@example.com", "secret")
        if result.has_session:
            ...
    """

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def create(cls, settings: Settings, storage: SessionCookieStorage) -> "SupabaseAuthProvider":
        """
        Create a provider whose client persists sessions into cookies.

        Uses the anon key: credentials are verified by Supabase Auth and
        Row Level Security still applies to anything done with the session.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if not is_supabase_configured(settings):
            raise SupabaseClientError(
                message="Supabase credentials not configured",
                code="NOT_CONFIGURED",
                suggestion="Set SUPABASE_URL and SUPABASE_ANON_KEY in your .env file",
            )

        try:
            client = create_client(
                settings.SUPABASE_URL,
                settings.SUPABASE_ANON_KEY,
                options=ClientOptions(
                    storage=storage,
                    persist_session=True,
                    # No background refresh timers inside a request
                    auto_refresh_token=False,
                ),
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file",
            ) from e

        return cls(client)

    def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        """
        Verify credentials with Supabase Auth.

        On success the session is written to the cookie storage as a side
        effect of the client call.

        Raises:
            SupabaseAuthError: If Supabase rejects the credentials
            AuthRetryableError: If Supabase could not be reached
        """
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthRetryableError:
            # Network failure, not a verdict on the credentials
            raise
        except AuthApiError as e:
            logger.info(f"Supabase rejected sign-in: {e.message}")
            raise SupabaseAuthError(provider_error_message(e), status=e.status) from e

        user = response.user
        return AuthResult(
            user_email=user.email if user else None,
            session=response.session,
        )

    def sign_out(self) -> None:
        """Revoke the cookie session and expire its cookies."""
        self._client.auth.sign_out()


def create_auth_provider(settings: Settings, storage: SessionCookieStorage) -> AuthProvider:
    """Default AuthProviderFactory backed by Supabase."""
    return SupabaseAuthProvider.create(settings, storage)
