"""Case (deal) endpoints, including conversion of a case into a project."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_session, require_member
from app.core.database import atomic, get_db
from app.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from app.core.rbac import require_authenticated
from app.models import Account, Case, Contact
from app.models.enums import CaseStage
from app.schemas.auth import AuthSession
from app.schemas.cases import (
    CaseCreate,
    CaseDetail,
    CaseOut,
    CaseResponse,
    CasesListResponse,
    CaseUpdate,
    ConvertedProject,
    ConvertResponse,
)
from app.services.case_conversion import convert_case_to_project
from app.services.project_access import can_access_case, visible_cases_query
from app.services.stages import next_case_stage, parse_enum
from app.services.users import resolve_owner_id

router = APIRouter()


def _detail(case: Case) -> CaseDetail:
    base = CaseOut.model_validate(case)
    return CaseDetail(**base.model_dump(), next_stage=next_case_stage(base.stage))


def _get_accessible_case(db: Session, session: AuthSession | None, case_id: str) -> Case:
    session = require_authenticated(session)
    case = db.get(Case, case_id)
    if case is None:
        raise NotFoundError("Case not found")
    if not can_access_case(db, session, case):
        raise ForbiddenError("You do not have access to this case")
    return case


@router.get("", response_model=CasesListResponse)
def list_cases(
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
    stage: Annotated[str | None, Query(max_length=32)] = None,
) -> CasesListResponse:
    """Cases the caller can see, newest activity first; optionally filtered by stage."""
    session = require_authenticated(session)
    query = visible_cases_query(db, session.user.id)
    if stage:
        parsed = parse_enum(CaseStage, stage)
        if parsed is None:
            raise InvalidInputError("Invalid stage")
        query = query.filter(Case.stage == parsed.value)
    cases = query.order_by(Case.updated_at.desc()).all()
    return CasesListResponse(cases=[CaseOut.model_validate(c) for c in cases])


@router.post("", response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
def create_case(
    body: CaseCreate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> CaseResponse:
    session = require_member(session)
    if db.get(Account, body.account_id) is None:
        raise InvalidInputError("account_id is invalid")
    if body.contact_id and db.get(Contact, body.contact_id) is None:
        raise InvalidInputError("contact_id is invalid")
    case = Case(
        title=body.title,
        description=body.description,
        stage=body.stage.value,
        account_id=body.account_id,
        contact_id=body.contact_id,
        owner_id=resolve_owner_id(db, body.owner_id, session.user.id),
    )
    with atomic(db):
        db.add(case)
        db.flush()
    return CaseResponse(case=_detail(case))


@router.get("/{case_id}", response_model=CaseResponse)
def get_case(
    case_id: str,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> CaseResponse:
    return CaseResponse(case=_detail(_get_accessible_case(db, session, case_id)))


@router.patch("/{case_id}", response_model=CaseResponse)
def update_case(
    case_id: str,
    body: CaseUpdate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> CaseResponse:
    """
    Update stage, title or description. Any stage may be set from any other;
    the LEAD -> WON order is only suggested to clients via next_stage.
    """
    case = _get_accessible_case(db, session, case_id)
    fields = body.model_fields_set
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "stage" in fields and body.stage is None:
        raise InvalidInputError("Invalid stage")
    if "title" in fields and body.title is None:
        raise InvalidInputError("title must not be empty")
    with atomic(db):
        if "stage" in fields:
            case.stage = body.stage.value
        if "title" in fields:
            case.title = body.title
        if "description" in fields:
            case.description = body.description
    return CaseResponse(case=_detail(case))


@router.post(
    "/{case_id}/convert",
    response_model=ConvertResponse,
    status_code=status.HTTP_201_CREATED,
)
def convert_case(
    case_id: str,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> ConvertResponse:
    """
    Turn the case into a project: the caller becomes its manager, the case
    moves to WON and links to the project. A case converts at most once (409
    on repeat).
    """
    project = convert_case_to_project(db, session, case_id)
    return ConvertResponse(project=ConvertedProject.model_validate(project))
