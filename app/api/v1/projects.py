"""Project endpoints and the project-scoped collections (members, epics, sprints, issues).

Every project-scoped route starts with assert_project_access; there is no
role-based bypass of project visibility.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_session, require_manager, require_member
from app.core.database import atomic, get_db
from app.core.errors import InvalidInputError, NotFoundError
from app.core.rbac import require_authenticated
from app.models import Account, Epic, Issue, Project, ProjectMember, Sprint
from app.models.enums import IssuePriority, IssueType, SprintStatus
from app.schemas.auth import AuthSession
from app.schemas.common import AccountSummary, UserSummary, as_utc
from app.schemas.projects import (
    EpicCreate,
    EpicResponse,
    EpicsListResponse,
    IssueCreate,
    IssueResponse,
    IssuesListResponse,
    MemberCreate,
    MemberOut,
    MemberResponse,
    MembersListResponse,
    ProjectCreate,
    ProjectDetail,
    ProjectOut,
    ProjectResponse,
    ProjectsListResponse,
    ProjectUpdate,
    SprintCreate,
    SprintResponse,
    SprintsListResponse,
)
from app.services import projects as project_service
from app.services.project_access import assert_project_access, visible_project_ids
from app.services.work_items import epic_out, issue_out, project_sprints, sprint_out

router = APIRouter()

ProjectSession = Annotated[AuthSession | None, Depends(get_session)]
DbSession = Annotated[Session, Depends(get_db)]


def _project_detail(db: Session, project: Project) -> ProjectDetail:
    base = ProjectOut.model_validate(project)
    return ProjectDetail(
        **base.model_dump(),
        description=project.description,
        start_date=project.start_date,
        end_date=project.end_date,
        owner=UserSummary.model_validate(project.owner) if project.owner else None,
        account=AccountSummary.model_validate(project.account) if project.account else None,
        sprints=sprint_out(db, project_sprints(db, project.id)),
    )


def _get_project(db: Session, project_id: str) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


@router.get("", response_model=ProjectsListResponse)
def list_projects(db: DbSession, session: ProjectSession) -> ProjectsListResponse:
    """Projects the caller is a member or owner of, newest first."""
    session = require_authenticated(session)
    visible = visible_project_ids(db, session.user.id)
    if not visible:
        return ProjectsListResponse(projects=[])
    projects = (
        db.query(Project)
        .filter(Project.id.in_(sorted(visible)))
        .order_by(Project.created_at.desc())
        .all()
    )
    return ProjectsListResponse(projects=[ProjectOut.model_validate(p) for p in projects])


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(body: ProjectCreate, db: DbSession, session: ProjectSession) -> ProjectResponse:
    """Create a project owned by the caller; a key is generated from the name when omitted."""
    session = require_member(session)
    if body.account_id and db.get(Account, body.account_id) is None:
        raise InvalidInputError("account_id is invalid")
    project = project_service.create_project(
        db,
        owner_id=session.user.id,
        name=body.name,
        key=body.key,
        description=body.description,
        account_id=body.account_id,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    return ProjectResponse(project=_project_detail(db, project))


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(project_id: str, db: DbSession, session: ProjectSession) -> ProjectResponse:
    assert_project_access(db, session, project_id)
    return ProjectResponse(project=_project_detail(db, _get_project(db, project_id)))


@router.patch("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str, body: ProjectUpdate, db: DbSession, session: ProjectSession
) -> ProjectResponse:
    require_manager(assert_project_access(db, session, project_id))
    project = _get_project(db, project_id)
    fields = body.model_fields_set
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "name" in fields and body.name is None:
        raise InvalidInputError("name must not be empty")
    # Stored values come back naive from backends without timestamptz.
    start = body.start_date if "start_date" in fields else as_utc(project.start_date)
    end = body.end_date if "end_date" in fields else as_utc(project.end_date)
    if start and end and start > end:
        raise InvalidInputError("start_date must be before end_date")
    with atomic(db):
        for field in ("name", "description", "start_date", "end_date"):
            if field in fields:
                setattr(project, field, getattr(body, field))
    return ProjectResponse(project=_project_detail(db, project))


@router.get("/{project_id}/members", response_model=MembersListResponse)
def list_members(project_id: str, db: DbSession, session: ProjectSession) -> MembersListResponse:
    assert_project_access(db, session, project_id)
    members = (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id)
        .order_by(ProjectMember.created_at.asc())
        .all()
    )
    return MembersListResponse(members=[MemberOut.model_validate(m) for m in members])


@router.post(
    "/{project_id}/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_member(
    project_id: str, body: MemberCreate, db: DbSession, session: ProjectSession
) -> MemberResponse:
    """Grant a user visibility into the project (manager rank required)."""
    require_manager(assert_project_access(db, session, project_id))
    member = project_service.add_project_member(db, project_id, body.user_id, body.role)
    return MemberResponse(member=MemberOut.model_validate(member))


@router.get("/{project_id}/epics", response_model=EpicsListResponse)
def list_epics(project_id: str, db: DbSession, session: ProjectSession) -> EpicsListResponse:
    assert_project_access(db, session, project_id)
    epics = (
        db.query(Epic)
        .filter(Epic.project_id == project_id)
        .order_by(Epic.created_at.asc())
        .all()
    )
    return EpicsListResponse(epics=epic_out(db, epics))


@router.post(
    "/{project_id}/epics",
    response_model=EpicResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_epic(
    project_id: str, body: EpicCreate, db: DbSession, session: ProjectSession
) -> EpicResponse:
    assert_project_access(db, session, project_id)
    epic = Epic(project_id=project_id, name=body.name, description=body.description)
    with atomic(db):
        db.add(epic)
        db.flush()
    return EpicResponse(epic=epic_out(db, [epic])[0])


@router.get("/{project_id}/sprints", response_model=SprintsListResponse)
def list_sprints(project_id: str, db: DbSession, session: ProjectSession) -> SprintsListResponse:
    assert_project_access(db, session, project_id)
    return SprintsListResponse(sprints=sprint_out(db, project_sprints(db, project_id)))


@router.post(
    "/{project_id}/sprints",
    response_model=SprintResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_sprint(
    project_id: str, body: SprintCreate, db: DbSession, session: ProjectSession
) -> SprintResponse:
    require_manager(assert_project_access(db, session, project_id))
    sprint = Sprint(
        project_id=project_id,
        name=body.name,
        goal=body.goal,
        status=(body.status or SprintStatus.PLANNED).value,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    with atomic(db):
        db.add(sprint)
        db.flush()
    return SprintResponse(sprint=sprint_out(db, [sprint])[0])


@router.post(
    "/{project_id}/issues",
    response_model=IssueResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_issue(
    project_id: str, body: IssueCreate, db: DbSession, session: ProjectSession
) -> IssueResponse:
    """Create an issue in the project; the caller is recorded as reporter."""
    session = assert_project_access(db, session, project_id)
    if body.epic_id:
        epic = db.get(Epic, body.epic_id)
        if epic is None or epic.project_id != project_id:
            raise InvalidInputError("epic_id is invalid")
    issue = Issue(
        project_id=project_id,
        reporter_id=session.user.id,
        epic_id=body.epic_id,
        title=body.title,
        description=body.description,
        priority=(body.priority or IssuePriority.MEDIUM).value,
        type=(body.type or IssueType.TASK).value,
        due_date=body.due_date,
    )
    with atomic(db):
        db.add(issue)
        db.flush()
    return IssueResponse(issue=issue_out(issue))


@router.get("/{project_id}/issues", response_model=IssuesListResponse)
@router.get("/{project_id}/issues/list", response_model=IssuesListResponse, include_in_schema=False)
def list_issues(project_id: str, db: DbSession, session: ProjectSession) -> IssuesListResponse:
    """Issues of this project only, most recently updated first, with assignees."""
    assert_project_access(db, session, project_id)
    issues = (
        db.query(Issue)
        .filter(Issue.project_id == project_id)
        .order_by(Issue.updated_at.desc())
        .all()
    )
    return IssuesListResponse(issues=[issue_out(i) for i in issues])
