# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - auth/: Login/logout routes and the HTTP cookie adapter
# - routers/: Other API endpoints (health)
#
# The app layer is thin - it handles HTTP concerns and delegates
# talking to Supabase to the lib/ package.
# =============================================================================
