"""Updates addressed by epic, sprint or issue id; access follows the parent project."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.v1.auth import get_session, require_manager
from app.core.database import atomic, get_db
from app.core.errors import InvalidInputError, NotFoundError
from app.core.rbac import require_authenticated
from app.models import Epic, Issue, Sprint
from app.schemas.auth import AuthSession
from app.schemas.projects import (
    EpicResponse,
    EpicUpdate,
    IssueResponse,
    IssueStatusUpdate,
    SprintResponse,
    SprintStatusUpdate,
)
from app.services.project_access import assert_project_access
from app.services.work_items import epic_out, issue_out, sprint_out

epics_router = APIRouter()
sprints_router = APIRouter()
issues_router = APIRouter()


@epics_router.patch("/{epic_id}", response_model=EpicResponse)
def update_epic(
    epic_id: str,
    body: EpicUpdate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> EpicResponse:
    session = require_authenticated(session)
    fields = body.model_fields_set
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "name" in fields and body.name is None:
        raise InvalidInputError("name must not be empty")
    epic = db.get(Epic, epic_id)
    if epic is None:
        raise NotFoundError("Epic not found")
    assert_project_access(db, session, epic.project_id)
    with atomic(db):
        if "name" in fields:
            epic.name = body.name
        if "description" in fields:
            epic.description = body.description
    return EpicResponse(epic=epic_out(db, [epic])[0])


@sprints_router.patch("/{sprint_id}", response_model=SprintResponse)
def update_sprint_status(
    sprint_id: str,
    body: SprintStatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> SprintResponse:
    session = require_authenticated(session)
    sprint = db.get(Sprint, sprint_id)
    if sprint is None:
        raise NotFoundError("Sprint not found")
    require_manager(assert_project_access(db, session, sprint.project_id))
    with atomic(db):
        sprint.status = body.status.value
    return SprintResponse(sprint=sprint_out(db, [sprint])[0])


@issues_router.patch("/{issue_id}/status", response_model=IssueResponse)
def update_issue_status(
    issue_id: str,
    body: IssueStatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> IssueResponse:
    """Move an issue to any status; the board suggests next_status but does not enforce it."""
    session = require_authenticated(session)
    issue = db.get(Issue, issue_id)
    if issue is None:
        raise NotFoundError("Issue not found")
    assert_project_access(db, session, issue.project_id)
    with atomic(db):
        issue.status = body.status.value
    return IssueResponse(issue=issue_out(issue))
