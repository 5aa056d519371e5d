"""Request/response schemas for login and the resolved session."""

from pydantic import BaseModel, Field, field_validator

from app.core.security import normalize_email


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=3, max_length=255, description="Email address")
    password: str = Field(..., min_length=1, max_length=128, description="Password")

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class SessionUser(BaseModel):
    """
    Identity carried by a session.

    role is the raw claim from the token; it is only trusted after parse_role
    recognises it.
    """

    id: str
    email: str
    name: str = ""
    role: str = ""


class AuthSession(BaseModel):
    """Resolved session passed explicitly into authorization and visibility checks."""

    user: SessionUser
