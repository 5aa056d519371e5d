"""Convert a won deal (case) into a project.

The whole conversion is one transaction: key generation, the project row,
its memberships and the case update either all commit or none do.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import atomic
from app.core.errors import (
    CaseAlreadyConvertedError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from app.core.rbac import require_authenticated
from app.models import Case, Project
from app.models.enums import CaseStage
from app.schemas.auth import AuthSession
from app.services.project_access import can_access_case
from app.services.projects import add_members, new_project_key

logger = logging.getLogger(__name__)

ACTOR_PROJECT_ROLE = "manager"
CASE_OWNER_PROJECT_ROLE = "member"


def _member_roles(actor_id: str, case_owner_id: str | None) -> dict[str, str]:
    roles = {actor_id: ACTOR_PROJECT_ROLE}
    if case_owner_id and case_owner_id != actor_id:
        roles[case_owner_id] = CASE_OWNER_PROJECT_ROLE
    return roles


def _is_converted(db: Session, case_id: str) -> bool:
    """True once the case is linked to a project or some project was created from it."""
    if db.query(Case.project_id).filter(Case.id == case_id).scalar() is not None:
        return True
    return db.query(Project.id).filter(Project.source_case_id == case_id).first() is not None


def convert_case_to_project(db: Session, session: AuthSession | None, case_id: str) -> Project:
    """
    Create a project from a case and mark the case WON.

    Raises UnauthorizedError, NotFoundError, ForbiddenError, or
    CaseAlreadyConvertedError when the case already has a project (including
    when a concurrent conversion committed first).
    """
    session = require_authenticated(session)
    actor_id = session.user.id

    try:
        with atomic(db):
            # Row lock so a concurrent conversion waits and then sees project_id.
            deal = db.query(Case).filter(Case.id == case_id).with_for_update().first()
            if deal is None:
                raise NotFoundError("Case not found")
            if not can_access_case(db, session, deal):
                raise ForbiddenError("You do not have access to this case")
            if deal.project_id is not None:
                raise CaseAlreadyConvertedError()

            base = deal.account.name if deal.account is not None else deal.title
            project = Project(
                key=new_project_key(db, base),
                name=deal.title,
                description=deal.description,
                account_id=deal.account_id,
                source_case_id=deal.id,
                start_date=datetime.now(UTC),
            )
            db.add(project)
            db.flush()

            members = add_members(db, project.id, _member_roles(actor_id, deal.owner_id))

            deal.stage = CaseStage.WON.value
            deal.project_id = project.id
            db.flush()
    except IntegrityError as e:
        if _is_converted(db, case_id):
            raise CaseAlreadyConvertedError() from e
        raise ConflictError("Project could not be created: key already in use") from e

    logger.info(
        "Case converted to project",
        extra={
            "case_id": case_id,
            "project_id": project.id,
            "project_key": project.key,
            "member_count": len(members),
            "actor_id": actor_id,
        },
    )
    return project
