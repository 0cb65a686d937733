# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error leaves the API as a JSON object with an "error" field and,
# for some errors, a "details" field.
# =============================================================================

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AwardsApiException(Exception):
    """
    Base exception for the awards API.

    All custom exceptions inherit from this class and are rendered by
    `awards_api_exception_handler`.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            result["details"] = self.details
        return result


# =============================================================================
# Request Exceptions
# =============================================================================

class ConfigurationMissingError(AwardsApiException):
    """Raised when the Supabase URL or anon key is not configured."""

    def __init__(self):
        super().__init__(
            message="Server configuration error - Supabase credentials not found",
            status_code=500,
        )


class MalformedRequestBodyError(AwardsApiException):
    """Raised when a non-empty request body is not valid JSON."""

    def __init__(self):
        super().__init__(
            message="Invalid request body",
            status_code=400,
            details="Could not parse JSON",
        )


class MissingCredentialsError(AwardsApiException):
    """Raised when email or password is absent from the login body."""

    def __init__(self):
        super().__init__(
            message="Email and password are required",
            status_code=400,
        )


# =============================================================================
# Authentication Exceptions
# =============================================================================

class AuthenticationRejectedError(AwardsApiException):
    """Raised when Supabase rejects the credentials. Carries its message."""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=401)


class SessionAbsentError(AwardsApiException):
    """Raised when sign-in succeeded but Supabase returned no session."""

    def __init__(self):
        super().__init__(message="No session created", status_code=500)


class InternalServerError(AwardsApiException):
    """Raised for anything unexpected while handling an auth request."""

    def __init__(self, details: Optional[str] = None):
        super().__init__(
            message="Internal server error",
            status_code=500,
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def awards_api_exception_handler(
    request: Request,
    exc: AwardsApiException
) -> JSONResponse:
    """Convert AwardsApiException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Last-resort handler for exceptions no route converted itself."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )
