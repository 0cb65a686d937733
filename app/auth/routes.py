# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Server-side login and logout against Supabase Auth.
#
# Credentials are verified by Supabase; these routes only translate its
# answers into the API's JSON envelope and move the session between
# Supabase and the browser's cookies.
# =============================================================================

import json
import logging
from typing import Any

from fastapi import APIRouter, Request, Response
from starlette.concurrency import run_in_threadpool

from app.auth.cookies import ResponseCookieAdapter
from app.auth.models import ErrorResponse, LoginRequest, LoginResponse, LoginUser, LogoutResponse
from app.config import Settings
from app.dependencies import AuthProviderFactoryDep, SettingsDep
from app.exceptions import (
    AuthenticationRejectedError,
    AwardsApiException,
    ConfigurationMissingError,
    InternalServerError,
    MalformedRequestBodyError,
    MissingCredentialsError,
    SessionAbsentError,
)
from lib.session_storage import SessionCookieStorage
from lib.supabase_client import AuthProvider, AuthProviderFactory, SupabaseAuthError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _require_supabase(settings: Settings) -> None:
    if not settings.is_supabase_configured:
        logger.error(
            "Missing Supabase configuration: "
            f"SUPABASE_URL {'set' if settings.SUPABASE_URL else 'missing'}, "
            f"SUPABASE_ANON_KEY {'set' if settings.SUPABASE_ANON_KEY else 'missing'}"
        )
        raise ConfigurationMissingError()


def _build_provider(
    request: Request,
    response: Response,
    settings: Settings,
    provider_factory: AuthProviderFactory,
) -> AuthProvider:
    adapter = ResponseCookieAdapter(response, settings)
    storage = SessionCookieStorage(adapter, request.headers.get("cookie"), settings.auth_cookie_name)
    return provider_factory(settings, storage)


async def _read_json_body(request: Request) -> Any:
    """Parse the raw body; an empty body counts as an empty object."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
        return json.loads(text) if text else {}
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Rejecting login body that is not JSON: {e}")
        raise MalformedRequestBodyError()


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def login(
    request: Request,
    response: Response,
    settings: SettingsDep,
    provider_factory: AuthProviderFactoryDep,
) -> LoginResponse:
    """
    Sign in with email and password.

    On success Supabase's session is attached to the response as cookies.

    Returns:
        LoginResponse: success flag, message and the verified user's email

    Raises:
        400: Body is not JSON, or email/password missing
        401: Supabase rejected the credentials
        500: Supabase not configured, no session issued, or unexpected error
    """
    try:
        _require_supabase(settings)

        body = await _read_json_body(request)
        credentials = LoginRequest.from_body(body)
        if credentials is None:
            logger.info("Login attempt without email or password")
            raise MissingCredentialsError()

        provider = _build_provider(request, response, settings, provider_factory)

        try:
            result = await run_in_threadpool(
                provider.sign_in_with_password,
                credentials.email,
                credentials.password,
            )
        except SupabaseAuthError as e:
            logger.info(f"Login rejected: {e.message}")
            raise AuthenticationRejectedError(e.message)

        if not result.has_session:
            logger.error("Supabase accepted the credentials but returned no session")
            raise SessionAbsentError()

        logger.info("Login successful")
        return LoginResponse(user=LoginUser(email=result.user_email))

    except AwardsApiException:
        raise
    except Exception as e:
        logger.exception(f"Login API error: {e}")
        raise InternalServerError(details=str(e) or "Unknown error")


@router.post(
    "/logout",
    response_model=LogoutResponse,
    responses={500: {"model": ErrorResponse}},
)
async def logout(
    request: Request,
    response: Response,
    settings: SettingsDep,
    provider_factory: AuthProviderFactoryDep,
) -> LogoutResponse:
    """
    Sign out the session carried by the request's cookies.

    The session cookies are expired on the response.
    """
    try:
        _require_supabase(settings)
        provider = _build_provider(request, response, settings, provider_factory)
        await run_in_threadpool(provider.sign_out)
        return LogoutResponse()

    except AwardsApiException:
        raise
    except Exception as e:
        logger.exception(f"Logout API error: {e}")
        raise InternalServerError()
