"""Schemas for self-service profile and admin user management."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.core.roles import Role, parse_role
from app.core.security import EMAIL_MAX_LEN, NAME_MAX_LEN, PASSWORD_MAX_LEN, normalize_email


def _require_role(value: object) -> Role:
    role = parse_role(value)
    if role is None:
        raise ValueError(f"role must be one of {[r.value for r in Role]}")
    return role


class UserOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    email: str
    name: str | None = None
    role: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserResponse(BaseModel):
    user: UserOut


class UsersListResponse(BaseModel):
    users: list[UserOut]


class ProfileUpdate(BaseModel):
    name: str = Field(..., max_length=NAME_MAX_LEN)

    @field_validator("name")
    @classmethod
    def require_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class PasswordChangeResponse(BaseModel):
    success: bool = True
    message: str = "Password updated. Please sign in again."


class UserCreate(BaseModel):
    """Admin-provisioned account; new users always start as active members."""

    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=8, max_length=PASSWORD_MAX_LEN)
    name: str = Field(default="", max_length=NAME_MAX_LEN)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = normalize_email(v)
        if "@" not in v:
            raise ValueError("email must be an email address")
        return v


class RoleUpdate(BaseModel):
    role: Role

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v: object) -> Role:
        return _require_role(v)


class ActiveUpdate(BaseModel):
    is_active: bool


class DeleteResponse(BaseModel):
    success: bool = True
