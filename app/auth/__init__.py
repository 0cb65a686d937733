# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Server-side login/logout backed by Supabase Auth, with the session kept
# in browser cookies.
#
# Usage:
#   from app.auth import routes as auth_routes
#   app.include_router(auth_routes.router, prefix="/api")
# =============================================================================

from app.auth.cookies import ResponseCookieAdapter, default_cookie_options
from app.auth.models import LoginRequest, LoginResponse, LoginUser, LogoutResponse

__all__ = [
    "ResponseCookieAdapter",
    "default_cookie_options",
    "LoginRequest",
    "LoginResponse",
    "LoginUser",
    "LogoutResponse",
]
