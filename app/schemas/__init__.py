"""Pydantic request/response schemas."""

from app.schemas.auth import AuthSession, LoginRequest, SessionUser, TokenResponse
from app.schemas.health import HealthResponse

__all__ = [
    "AuthSession",
    "HealthResponse",
    "LoginRequest",
    "SessionUser",
    "TokenResponse",
]
