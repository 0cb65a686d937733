# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication request and response bodies.
# =============================================================================

from typing import Any, Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """
    Credentials accepted by POST /api/auth/login.

    The route parses the raw body itself so that malformed JSON and missing
    fields produce the documented error envelopes; this model is built only
    once both fields are known to be non-empty strings.
    """
    email: str
    password: str

    @classmethod
    def from_body(cls, body: Any) -> Optional["LoginRequest"]:
        """Return the credentials, or None when either one is missing."""
        if not isinstance(body, dict):
            return None
        email = body.get("email")
        password = body.get("password")
        if not (isinstance(email, str) and email and isinstance(password, str) and password):
            return None
        return cls(email=email, password=password)


class LoginUser(BaseModel):
    """The verified user, as reported by Supabase."""
    email: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: LoginUser


class LogoutResponse(BaseModel):
    success: bool = True
    message: str = "Logged out successfully"


class ErrorResponse(BaseModel):
    """Shape of every error body returned by the auth routes."""
    error: str
    details: Optional[str] = None
