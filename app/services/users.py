"""User administration and self-service writes."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import atomic
from app.core.errors import ConflictError, InvalidInputError, NotFoundError
from app.core.roles import Role
from app.core.security import PASSWORD_MIN_LEN, hash_password, normalize_email, verify_password
from app.models import User

logger = logging.getLogger(__name__)


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def resolve_owner_id(db: Session, owner_id: str | None, fallback: str) -> str:
    """owner_id when it names a user, the caller when omitted; InvalidInputError otherwise."""
    resolved = owner_id or fallback
    if db.get(User, resolved) is None:
        raise InvalidInputError("owner_id is invalid")
    return resolved


def create_user(
    db: Session,
    email: str,
    password: str,
    name: str | None = None,
    role: Role = Role.MEMBER,
    is_active: bool = True,
) -> User:
    """Insert a user; a duplicate email becomes ConflictError."""
    if len(password) < PASSWORD_MIN_LEN:
        raise InvalidInputError(f"password must be at least {PASSWORD_MIN_LEN} characters")
    user = User(
        email=normalize_email(email),
        name=(name or "").strip() or None,
        password_hash=hash_password(password),
        role=role.value,
        is_active=is_active,
    )
    try:
        with atomic(db):
            db.add(user)
            db.flush()
    except IntegrityError as e:
        raise ConflictError("Email is already registered") from e
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return user


def set_role(db: Session, actor_id: str, user_id: str, role: Role) -> User:
    if actor_id == user_id:
        raise InvalidInputError("You cannot change your own role")
    user = get_user_or_404(db, user_id)
    with atomic(db):
        user.role = role.value
    logger.info(
        "User role changed",
        extra={"user_id": user_id, "role": role.value, "actor_id": actor_id},
    )
    return user


def set_active(db: Session, actor_id: str, user_id: str, is_active: bool) -> User:
    if actor_id == user_id:
        raise InvalidInputError("You cannot change your own active flag")
    user = get_user_or_404(db, user_id)
    with atomic(db):
        user.is_active = is_active
    logger.info(
        "User active flag changed",
        extra={"user_id": user_id, "is_active": is_active, "actor_id": actor_id},
    )
    return user


def delete_user_by_email(db: Session, actor_id: str, email: str) -> None:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        raise NotFoundError("User not found")
    user_id = user.id
    if user_id == actor_id:
        raise InvalidInputError("You cannot delete yourself")
    try:
        with atomic(db):
            db.delete(user)
    except IntegrityError as e:
        raise ConflictError("User still owns or is referenced by records") from e
    logger.warning("User deleted", extra={"user_id": user_id, "actor_id": actor_id})


def rename(db: Session, user: User, name: str) -> User:
    with atomic(db):
        user.name = name
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if len(new_password) < PASSWORD_MIN_LEN:
        raise InvalidInputError(f"new_password must be at least {PASSWORD_MIN_LEN} characters")
    if not user.password_hash:
        raise InvalidInputError("Password update unavailable")
    if not verify_password(current_password, user.password_hash):
        raise InvalidInputError("Current password is incorrect")
    if verify_password(new_password, user.password_hash):
        raise InvalidInputError("New password must differ from current password")
    with atomic(db):
        user.password_hash = hash_password(new_password)
    logger.info("User password changed", extra={"user_id": user.id})
