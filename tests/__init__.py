# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the XR Awards API:
# - test_config.py: Settings parsing and derived properties
# - test_session_storage.py: Cookie-backed session storage (encoding, chunking)
# - test_cookies.py: HTTP cookie adapter defaults and overrides
# - test_supabase_client.py: Supabase wrapper with a mocked SDK client
# - test_auth_routes.py: Login/logout endpoint contract
# - test_health.py: Health endpoints
#
# Run tests with: poetry run pytest
# =============================================================================
