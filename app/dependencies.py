# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(), and replaced in
# tests through app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.config import Settings, get_settings
from lib.supabase_client import AuthProviderFactory, create_auth_provider


def get_auth_provider_factory() -> AuthProviderFactory:
    """
    Get the factory that builds a per-request auth provider.

    Returns the Supabase-backed factory.
    """
    return create_auth_provider


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
AuthProviderFactoryDep = Annotated[AuthProviderFactory, Depends(get_auth_provider_factory)]
