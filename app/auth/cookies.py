# =============================================================================
# app/auth/cookies.py - HTTP Cookie Adapter
# =============================================================================
# CookieAdapter implementation bound to one FastAPI request/response pair.
#
# Session cookies are written with these defaults unless the provider
# supplies its own value for an attribute:
#   path=/  httponly  samesite=lax  secure=<settings.cookie_secure>
#   max_age=<settings.SESSION_COOKIE_MAX_AGE> (7 days)
#
# A response carries at most one Set-Cookie per cookie name.
# =============================================================================

import logging
from typing import Any, Optional

from fastapi import Response
from starlette.requests import cookie_parser

from app.config import Settings
from lib.session_storage import CookieAdapter, CookieToSet, RequestCookie

logger = logging.getLogger(__name__)


def default_cookie_options(settings: Settings) -> dict[str, Any]:
    return {
        "path": "/",
        "httponly": True,
        "samesite": "lax",
        "secure": settings.cookie_secure,
        "max_age": settings.SESSION_COOKIE_MAX_AGE,
    }


class ResponseCookieAdapter(CookieAdapter):
    """Reads cookies from a Cookie header and sets them on a Response."""

    def __init__(self, response: Response, settings: Settings):
        self._response = response
        self._settings = settings

    def read_cookies(self, header_value: Optional[str]) -> list[RequestCookie]:
        if not header_value:
            return []
        return [
            RequestCookie(name=name, value=value)
            for name, value in cookie_parser(header_value).items()
        ]

    def _drop_set_cookie(self, name: str) -> None:
        """Forget an earlier Set-Cookie for `name`; the last write wins."""
        prefix = f"{name}=".encode("latin-1")
        # In place: Response.headers wraps this same list
        self._response.raw_headers[:] = [
            (key, value)
            for key, value in self._response.raw_headers
            if not (key.lower() == b"set-cookie" and value.startswith(prefix))
        ]

    def write_cookies(self, cookies: list[CookieToSet]) -> None:
        for cookie in cookies:
            options = {**default_cookie_options(self._settings), **cookie.options}
            self._drop_set_cookie(cookie.name)
            self._response.set_cookie(key=cookie.name, value=cookie.value, **options)
            logger.debug(f"Set-Cookie {cookie.name} (max_age={options.get('max_age')})")
