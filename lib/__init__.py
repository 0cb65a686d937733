# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Per-request Supabase auth client wrapper
# - session_storage.py: Cookie-backed session storage for the auth client
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.session_storage import (
    CookieAdapter,
    CookieToSet,
    RequestCookie,
    SessionCookieStorage,
)
from lib.supabase_client import (
    AuthProvider,
    AuthProviderFactory,
    AuthResult,
    SupabaseAuthError,
    SupabaseAuthProvider,
    SupabaseClientError,
    create_auth_provider,
    is_supabase_configured,
    provider_error_message,
)

__all__ = [
    # Cookies
    "CookieAdapter",
    "CookieToSet",
    "RequestCookie",
    "SessionCookieStorage",
    # Supabase
    "AuthProvider",
    "AuthProviderFactory",
    "AuthResult",
    "SupabaseAuthError",
    "SupabaseAuthProvider",
    "SupabaseClientError",
    "create_auth_provider",
    "is_supabase_configured",
    "provider_error_message",
]
