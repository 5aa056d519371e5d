"""Self-service profile endpoints for the signed-in user."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_session
from app.core.database import get_db
from app.core.errors import UnauthorizedError
from app.core.rbac import require_authenticated
from app.models import User
from app.schemas.auth import AuthSession
from app.schemas.users import (
    PasswordChange,
    PasswordChangeResponse,
    ProfileUpdate,
    UserOut,
    UserResponse,
)
from app.services import users as user_service

router = APIRouter()


def _current_user(db: Session, session: AuthSession | None) -> User:
    session = require_authenticated(session)
    user = db.get(User, session.user.id)
    if user is None:
        raise UnauthorizedError()
    return user


@router.get("", response_model=UserResponse)
def get_me(
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> UserResponse:
    return UserResponse(user=UserOut.model_validate(_current_user(db, session)))


@router.patch("", response_model=UserResponse)
def update_me(
    body: ProfileUpdate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> UserResponse:
    """Change the display name. Role and active flag are admin-managed."""
    user = user_service.rename(db, _current_user(db, session), body.name)
    return UserResponse(user=UserOut.model_validate(user))


@router.post("/password", response_model=PasswordChangeResponse)
def change_password(
    body: PasswordChange,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> PasswordChangeResponse:
    user_service.change_password(
        db, _current_user(db, session), body.current_password, body.new_password
    )
    return PasswordChangeResponse()
