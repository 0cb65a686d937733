# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a fake Supabase auth provider injected through
#   app.dependency_overrides, so no test talks to Supabase
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import json
from dataclasses import dataclass, field
from typing import Optional
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from supabase_auth.constants import STORAGE_KEY

from app.config import Settings, get_settings
from app.dependencies import get_auth_provider_factory
from app.main import app
from lib.session_storage import CookieAdapter, CookieToSet, RequestCookie, SessionCookieStorage
from lib.supabase_client import AuthResult, SupabaseAuthError

# Cookie name the session is stored under for https://test-project.supabase.co
SESSION_KEY = "sb-test-project-auth-token"


# =============================================================================
# Fakes
# =============================================================================

class RecordingCookieAdapter(CookieAdapter):
    """In-memory CookieAdapter: request cookies from a dict, writes recorded."""

    def __init__(self, request_cookies: Optional[dict[str, str]] = None):
        self.request_cookies = request_cookies or {}
        self.written: list[CookieToSet] = []
        self.headers_seen: list[Optional[str]] = []

    def read_cookies(self, header_value):
        self.headers_seen.append(header_value)
        return [RequestCookie(name=k, value=v) for k, v in self.request_cookies.items()]

    def write_cookies(self, cookies):
        self.written.extend(cookies)

    def written_names(self) -> list[str]:
        return [c.name for c in self.written]


@dataclass
class ProviderBehaviour:
    """How the fake provider answers the next requests."""
    reject_with: Optional[str] = None
    raise_exc: Optional[Exception] = None
    issue_session: bool = True
    reported_email: Optional[str] = None
    calls: list[tuple[str, str]] = field(default_factory=list)
    sign_outs: int = 0


class FakeAuthProvider:
    """
    Stands in for SupabaseAuthProvider; writes sessions into the storage.

    Uses the auth client's storage key and, like the client, clears the old
    session before saving a new one.
    """

    def __init__(self, storage: SessionCookieStorage, behaviour: ProviderBehaviour):
        self.storage = storage
        self.behaviour = behaviour

    def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        self.behaviour.calls.append((email, password))
        if self.behaviour.raise_exc is not None:
            raise self.behaviour.raise_exc
        if self.behaviour.reject_with is not None:
            raise SupabaseAuthError(self.behaviour.reject_with, status=400)

        user_email = self.behaviour.reported_email or email
        if not self.behaviour.issue_session:
            return AuthResult(user_email=user_email, session=None)

        session = {
            "access_token": f"access-{uuid4()}",
            "refresh_token": f"refresh-{uuid4()}",
            "token_type": "bearer",
            "user": {"email": user_email},
        }
        self.storage.remove_item(STORAGE_KEY)
        self.storage.set_item(STORAGE_KEY, json.dumps(session))
        return AuthResult(user_email=user_email, session=session)

    def sign_out(self) -> None:
        self.behaviour.sign_outs += 1
        if self.behaviour.raise_exc is not None:
            raise self.behaviour.raise_exc
        self.storage.remove_item(STORAGE_KEY)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def make_settings():
    """Build Settings without reading .env; keyword arguments win over env."""
    def _make(**overrides) -> Settings:
        values = {
            "SUPABASE_URL": "https://test-project.supabase.co",
            "SUPABASE_ANON_KEY": "test-anon-key",
            "ENVIRONMENT": "development",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def provider_behaviour():
    return ProviderBehaviour()


@pytest.fixture
def test_settings(make_settings):
    return make_settings()


@pytest.fixture
def client(test_settings, provider_behaviour):
    """TestClient with settings and the auth provider overridden."""
    def factory(settings, storage):
        return FakeAuthProvider(storage, provider_behaviour)

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_auth_provider_factory] = lambda: factory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def recording_adapter():
    return RecordingCookieAdapter()
