"""Admin user management (create, role, active flag, delete)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_session
from app.core.database import get_db
from app.core.errors import ForbiddenError
from app.core.rbac import assert_role, is_admin, require_authenticated, role_in
from app.core.roles import Role
from app.models import User
from app.schemas.auth import AuthSession
from app.schemas.users import (
    ActiveUpdate,
    DeleteResponse,
    RoleUpdate,
    UserCreate,
    UserOut,
    UserResponse,
    UsersListResponse,
)
from app.services import users as user_service

router = APIRouter()

# Exact set, not "manager or above"; see app.core.rbac.
USER_ADMIN_ROLES = frozenset({Role.ADMIN, Role.MANAGER})


def _require_user_admin(session: AuthSession | None) -> AuthSession:
    session = require_authenticated(session)
    if not role_in(session, USER_ADMIN_ROLES):
        raise ForbiddenError("Admin or manager role required")
    return session


@router.get("", response_model=UsersListResponse)
def list_users(
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> UsersListResponse:
    _require_user_admin(session)
    users = db.query(User).order_by(User.email).all()
    return UsersListResponse(users=[UserOut.model_validate(u) for u in users])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> UserResponse:
    """Provision an active member account. Duplicate email returns 409."""
    _require_user_admin(session)
    user = user_service.create_user(db, email=body.email, password=body.password, name=body.name)
    return UserResponse(user=UserOut.model_validate(user))


@router.patch("/{user_id}/role", response_model=UserResponse)
def update_role(
    user_id: str,
    body: RoleUpdate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> UserResponse:
    """Change another user's role; takes effect at that user's next login."""
    session = assert_role(require_authenticated(session), USER_ADMIN_ROLES)
    user = user_service.set_role(db, session.user.id, user_id, body.role)
    return UserResponse(user=UserOut.model_validate(user))


@router.patch("/{user_id}/active", response_model=UserResponse)
def update_active(
    user_id: str,
    body: ActiveUpdate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> UserResponse:
    session = assert_role(require_authenticated(session), USER_ADMIN_ROLES)
    user = user_service.set_active(db, session.user.id, user_id, body.is_active)
    return UserResponse(user=UserOut.model_validate(user))


@router.delete("", response_model=DeleteResponse)
def delete_user(
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
    email: Annotated[str, Query(min_length=3, max_length=255)],
) -> DeleteResponse:
    """Hard-delete a user by email (admin only)."""
    session = require_authenticated(session)
    if not is_admin(session):
        raise ForbiddenError("Admin access required")
    user_service.delete_user_by_email(db, session.user.id, email)
    return DeleteResponse()
