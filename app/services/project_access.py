"""Project visibility: which projects (and cases) a user may see or change.

Visibility is granted by ProjectMember rows and by project ownership. Global
roles do not bypass it; an admin with no membership or ownership sees nothing.
"""

import logging

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Query, Session

from app.core.errors import ForbiddenError
from app.core.rbac import require_authenticated, session_user_id
from app.models import Case, Project, ProjectMember
from app.schemas.auth import AuthSession

logger = logging.getLogger(__name__)


def visible_project_ids(db: Session, user_id: str | None) -> set[str]:
    """Union of the user's membership project ids and owned project ids."""
    if not user_id:
        return set()
    memberships = (
        db.query(ProjectMember.project_id)
        .filter(ProjectMember.user_id == user_id)
        .all()
    )
    owned = db.query(Project.id).filter(Project.owner_id == user_id).all()

    ids: set[str] = {row.project_id for row in memberships}
    ids.update(row.id for row in owned)
    return ids


def assert_project_access(
    db: Session,
    session: AuthSession | None,
    project_id: str | None,
) -> AuthSession:
    """
    Accept or reject the session for one project.

    Raises UnauthorizedError without a session and ForbiddenError when the
    project is not visible. Returns the session so callers can apply further
    role checks (e.g. manager-only writes).
    """
    session = require_authenticated(session)
    if not project_id:
        raise ForbiddenError("Missing project id")
    if project_id not in visible_project_ids(db, session.user.id):
        logger.info(
            "Project access denied",
            extra={"user_id": session.user.id, "project_id": project_id},
        )
        raise ForbiddenError("You do not have access to this project")
    return session


def _member_account_ids(user_id: str):
    """Subquery: accounts with at least one project the user is a member of."""
    return (
        select(Project.account_id)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .where(ProjectMember.user_id == user_id, Project.account_id.isnot(None))
    )


def has_account_project_membership(db: Session, user_id: str | None, account_id: str | None) -> bool:
    """
    True when the user is a member of some project tied to the account.

    This is the looser path used for cases that have no project yet; epics,
    sprints and issues never use it.
    """
    if not user_id or not account_id:
        return False
    row = (
        db.query(ProjectMember.id)
        .join(Project, Project.id == ProjectMember.project_id)
        .filter(ProjectMember.user_id == user_id, Project.account_id == account_id)
        .first()
    )
    return row is not None


def can_access_case(db: Session, session: AuthSession | None, case: Case) -> bool:
    user_id = session_user_id(session)
    if user_id is None:
        return False
    if case.project_id and case.project_id in visible_project_ids(db, user_id):
        return True
    return has_account_project_membership(db, user_id, case.account_id)


def visible_cases_query(db: Session, user_id: str) -> Query:
    """
    Cases whose project is visible, plus unconverted cases whose account has a
    project the user is a member of.
    """
    visible = visible_project_ids(db, user_id)
    return db.query(Case).filter(
        or_(
            Case.project_id.in_(sorted(visible)),
            and_(
                Case.project_id.is_(None),
                Case.account_id.in_(_member_account_ids(user_id)),
            ),
        )
    )
