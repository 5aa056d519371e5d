"""JWT login and the session dependency used by every route."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ForbiddenError
from app.core.rbac import has_at_least, require_authenticated
from app.core.roles import Role
from app.core.security import create_access_token, decode_access_token, verify_password
from app.models.user import User
from app.schemas.auth import AuthSession, LoginRequest, SessionUser, TokenResponse

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>

    Inactive users cannot log in. Tokens already issued stay valid until they expire.
    """
    user = db.query(User).filter(User.email == body.email).first()
    if user is None or not user.is_active or not verify_password(body.password, user.password_hash):
        logger.warning("Login failed", extra={"email_domain": body.email.rpartition("@")[2]})
        raise _unauthorized("Invalid email or password.")
    token = create_access_token(sub=user.id, role=user.role, email=user.email, name=user.name)
    return TokenResponse(access_token=token, token_type="bearer")


def get_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthSession | None:
    """
    Dependency: resolve the caller's session from the Bearer token.

    Returns None when no token is sent, so guards can decide between 401 and
    403 themselves. A token that is invalid, expired or names a deleted user is
    rejected with 401. The role comes from the token, as issued at login.
    """
    if credentials is None:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise _unauthorized("Invalid token payload")
    user = db.get(User, sub)
    if user is None:
        raise _unauthorized("User not found")
    return AuthSession(
        user=SessionUser(
            id=user.id,
            email=user.email,
            name=user.name or "",
            role=str(payload.get("role") or ""),
        )
    )


def require_member(session: AuthSession | None) -> AuthSession:
    """Authenticated with at least member rank; viewers are read-only."""
    session = require_authenticated(session)
    if not has_at_least(session, Role.MEMBER):
        raise ForbiddenError("Insufficient role")
    return session


def require_manager(session: AuthSession) -> AuthSession:
    """Manager rank or above, checked after a project guard has passed."""
    if not has_at_least(session, Role.MANAGER):
        raise ForbiddenError("Insufficient role")
    return session
