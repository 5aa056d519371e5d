"""Project creation and membership writes shared by routes and case conversion."""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import atomic
from app.core.errors import ConflictError, InvalidInputError
from app.models import Project, ProjectMember, User
from app.schemas.common import as_utc
from app.services.project_keys import generate_project_key

logger = logging.getLogger(__name__)

# In-project roles. These are labels on the membership row; visibility does not depend on them.
PROJECT_MEMBER_ROLES = frozenset({"owner", "manager", "member", "viewer"})


def project_key_exists(db: Session, key: str) -> bool:
    return db.query(Project.id).filter(Project.key == key).first() is not None


def new_project_key(db: Session, base: str | None) -> str:
    return generate_project_key(
        base,
        lambda candidate: project_key_exists(db, candidate),
        max_attempts=get_settings().PROJECT_KEY_MAX_ATTEMPTS,
    )


def add_members(db: Session, project_id: str, roles_by_user: dict[str, str]) -> list[ProjectMember]:
    """Stage membership rows (no commit); users already on the project are skipped."""
    existing = {
        row.user_id
        for row in db.query(ProjectMember.user_id)
        .filter(ProjectMember.project_id == project_id)
        .all()
    }
    created = []
    for user_id, role in roles_by_user.items():
        if user_id in existing:
            continue
        member = ProjectMember(project_id=project_id, user_id=user_id, role=role)
        db.add(member)
        created.append(member)
    db.flush()
    return created


def create_project(
    db: Session,
    owner_id: str,
    name: str,
    key: str | None = None,
    description: str | None = None,
    account_id: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> Project:
    """Create a project owned by owner_id with the owner as its first member."""
    start_date, end_date = as_utc(start_date), as_utc(end_date)
    if start_date and end_date and start_date > end_date:
        raise InvalidInputError("start_date must be before end_date")
    try:
        with atomic(db):
            project = Project(
                key=key or new_project_key(db, name),
                name=name,
                description=description,
                owner_id=owner_id,
                account_id=account_id,
                start_date=start_date or datetime.now(UTC),
                end_date=end_date,
            )
            db.add(project)
            db.flush()
            add_members(db, project.id, {owner_id: "owner"})
    except IntegrityError as e:
        raise ConflictError("Project key must be unique") from e
    logger.info(
        "Project created",
        extra={"project_id": project.id, "project_key": project.key, "owner_id": owner_id},
    )
    return project


def add_project_member(db: Session, project_id: str, user_id: str, role: str) -> ProjectMember:
    if role not in PROJECT_MEMBER_ROLES:
        raise InvalidInputError(f"role must be one of {sorted(PROJECT_MEMBER_ROLES)}")
    if db.get(User, user_id) is None:
        raise InvalidInputError("user_id is invalid")
    try:
        with atomic(db):
            created = add_members(db, project_id, {user_id: role})
            if not created:
                raise ConflictError("User is already a member of this project")
    except IntegrityError as e:
        raise ConflictError("User is already a member of this project") from e
    return created[0]
