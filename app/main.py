# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the XR Awards API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.exceptions import (
    AwardsApiException,
    awards_api_exception_handler,
    unhandled_exception_handler,
)
from app.routers import health
from app.routers.health import API_VERSION
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective configuration on startup. Missing Supabase
    credentials are reported but do not stop the API from starting.
    """
    logger.info(f"Starting XR Awards API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.is_supabase_configured:
        logger.warning("SUPABASE_URL or SUPABASE_ANON_KEY not set; auth endpoints will return 500")
    if not settings.cookie_secure:
        logger.warning("Session cookies are issued without the Secure flag")

    yield

    logger.info("Shutting down XR Awards API")


# Create FastAPI application
app = FastAPI(
    title="XR Awards API",
    description="""
## Server-side authentication for the XR Awards site

Credentials are verified by Supabase Auth. On success the Supabase session
is stored in HTTP-only cookies so server-rendered admin pages can use it.

```bash
curl -i -X POST http://localhost:8000/api/auth/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "admin@example.com", "password": "..."}'
```
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Login and logout against Supabase Auth",
        },
        {
            "name": "Health",
            "description": "API health and liveness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests (cookies included)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(AwardsApiException)
async def handle_awards_api_exception(request: Request, exc: AwardsApiException):
    """Handle custom API exceptions."""
    return await awards_api_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    return await unhandled_exception_handler(request, exc)


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints (/api/auth/login, /api/auth/logout)
app.include_router(
    auth_routes.router,
    prefix="/api",
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "XR Awards API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/health",
    }
