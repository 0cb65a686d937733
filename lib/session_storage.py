# =============================================================================
# lib/session_storage.py - Cookie-Backed Session Storage
# =============================================================================
# Bridges the Supabase auth client's session storage and the HTTP
# request/response cycle.
#
# The auth client reads and writes its session through a storage object.
# SessionCookieStorage implements that storage on top of a CookieAdapter:
# reads come from the incoming Cookie header, writes become Set-Cookie
# headers on the outgoing response. Nothing outlives the request.
#
# Cookie format (compatible with the Supabase SSR helpers used by the site):
# - values are written as "base64-" + urlsafe base64 of the UTF-8 value
# - the session is named sb-<project-ref>-auth-token when a cookie name is given
# - values longer than MAX_CHUNK_SIZE are split into <name>.0, <name>.1, ...
#
# Usage:
#   storage = SessionCookieStorage(adapter, request.headers.get("cookie"), settings.auth_cookie_name)
#   client = create_client(url, key, options=ClientOptions(storage=storage))
# =============================================================================

from __future__ import annotations

import base64
import binascii
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from supabase_auth import SyncSupportedStorage
from supabase_auth.constants import STORAGE_KEY

logger = logging.getLogger(__name__)

# Leaves room for the cookie name and attributes under the 4096 byte limit
MAX_CHUNK_SIZE = 3180
BASE64_PREFIX = "base64-"


@dataclass(frozen=True)
class RequestCookie:
    """A cookie as sent by the browser."""
    name: str
    value: str


@dataclass
class CookieToSet:
    """
    A cookie the provider wants persisted.

    `options` holds explicit Set-Cookie attributes (path, httponly, samesite,
    secure, max_age, domain, expires). Anything omitted falls back to the
    adapter's defaults.
    """
    name: str
    value: str
    options: dict[str, Any] = field(default_factory=dict)


class CookieAdapter(ABC):
    """Read/write interface between the auth client and HTTP cookies."""

    @abstractmethod
    def read_cookies(self, header_value: Optional[str]) -> list[RequestCookie]:
        """Parse every cookie from a raw Cookie header value."""

    @abstractmethod
    def write_cookies(self, cookies: list[CookieToSet]) -> None:
        """Attach the given cookies to the outgoing response."""


def encode_cookie_value(value: str) -> str:
    # Unpadded so the value needs no quoting in Set-Cookie
    encoded = base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii").rstrip("=")
    return f"{BASE64_PREFIX}{encoded}"


def decode_cookie_value(raw: str) -> Optional[str]:
    """
    Decode a stored cookie value.

    Values without the base64 prefix are returned verbatim. Returns None
    when the prefixed payload is corrupt.
    """
    if not raw.startswith(BASE64_PREFIX):
        return raw

    payload = raw[len(BASE64_PREFIX):]
    # Browsers and proxies sometimes drop the padding
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.urlsafe_b64decode(payload.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        logger.warning(f"Discarding undecodable session cookie: {e}")
        return None


def chunk_value(value: str, size: int = MAX_CHUNK_SIZE) -> list[str]:
    """Split a cookie value into pieces of at most `size` characters."""
    return [value[i:i + size] for i in range(0, len(value), size)] or [""]


class SessionCookieStorage(SyncSupportedStorage):
    """
    Supabase auth storage that lives in the request's cookies.

    The auth client uses its own storage key (`supabase.auth.token`). When a
    `cookie_name` is given, that key is stored under the cookie name instead,
    e.g. `sb-<project-ref>-auth-token` as browser-side Supabase clients
    expect; derived keys such as `<key>-code-verifier` keep their suffix.

    Reads consult values written earlier in the same request first, then the
    Cookie header. Writes and removals are forwarded to the adapter
    immediately so they end up on the response.
    """

    def __init__(
        self,
        adapter: CookieAdapter,
        cookie_header: Optional[str] = None,
        cookie_name: Optional[str] = None,
    ):
        self._adapter = adapter
        self._cookie_header = cookie_header
        self._cookie_name = cookie_name
        # key -> value written during this request (None when removed)
        self._pending: dict[str, Optional[str]] = {}
        # key -> cookie names written for it during this request
        self._written: dict[str, set[str]] = {}

    def cookie_name_for(self, key: str) -> str:
        if self._cookie_name and key.startswith(STORAGE_KEY):
            return self._cookie_name + key[len(STORAGE_KEY):]
        return key

    def _request_cookies(self) -> dict[str, str]:
        return {c.name: c.value for c in self._adapter.read_cookies(self._cookie_header)}

    def _existing_names(self, name: str, cookies: dict[str, str]) -> list[str]:
        """Names of the request cookies that hold `name`, chunked or whole."""
        chunk_pattern = re.compile(rf"^{re.escape(name)}\.\d+$")
        return [c for c in cookies if c == name or chunk_pattern.match(c)]

    def _names_in_use(self, key: str) -> set[str]:
        """Cookies for `key` the browser holds or this response already sets."""
        name = self.cookie_name_for(key)
        return set(self._existing_names(name, self._request_cookies())) | self._written.get(key, set())

    def get_item(self, key: str) -> Optional[str]:
        if key in self._pending:
            return self._pending[key]

        name = self.cookie_name_for(key)
        cookies = self._request_cookies()
        if name in cookies:
            raw = cookies[name]
        else:
            chunks = []
            index = 0
            while f"{name}.{index}" in cookies:
                chunks.append(cookies[f"{name}.{index}"])
                index += 1
            if not chunks:
                return None
            raw = "".join(chunks)

        return decode_cookie_value(raw)

    def set_item(self, key: str, value: str) -> None:
        name = self.cookie_name_for(key)
        encoded = encode_cookie_value(value)
        pieces = chunk_value(encoded)

        if len(pieces) == 1:
            to_set = [CookieToSet(name=name, value=encoded)]
        else:
            to_set = [
                CookieToSet(name=f"{name}.{index}", value=piece)
                for index, piece in enumerate(pieces)
            ]

        written = {c.name for c in to_set}
        stale = [
            CookieToSet(name=stale_name, value="", options={"max_age": 0})
            for stale_name in sorted(self._names_in_use(key) - written)
        ]

        logger.debug(f"Persisting session cookie {name} in {len(to_set)} piece(s)")
        self._adapter.write_cookies(to_set + stale)
        self._pending[key] = value
        self._written[key] = written

    def remove_item(self, key: str) -> None:
        names = self._names_in_use(key)
        self._pending[key] = None
        self._written.pop(key, None)
        if not names:
            return

        self._adapter.write_cookies([
            CookieToSet(name=name, value="", options={"max_age": 0})
            for name in sorted(names)
        ])
