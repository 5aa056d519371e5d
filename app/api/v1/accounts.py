"""Account endpoints: list, detail, create, update, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.v1.auth import get_session, require_member
from app.core.database import atomic, get_db
from app.core.errors import ConflictError, InvalidInputError, NotFoundError
from app.core.rbac import require_authenticated
from app.models import Account, Case, Contact, Project
from app.schemas.accounts import (
    AccountCreate,
    AccountDetail,
    AccountOut,
    AccountResponse,
    AccountsListResponse,
    AccountUpdate,
    CaseBrief,
    ContactBrief,
    ProjectBrief,
    RecordCounts,
)
from app.schemas.auth import AuthSession
from app.schemas.users import DeleteResponse
from app.services.users import resolve_owner_id

router = APIRouter()


def _counts(db: Session, account_ids: list[str]) -> dict[str, RecordCounts]:
    counts = {account_id: RecordCounts() for account_id in account_ids}
    if not account_ids:
        return counts
    for model, field in ((Contact, "contacts"), (Case, "cases"), (Project, "projects")):
        rows = (
            db.query(model.account_id, func.count(model.id))
            .filter(model.account_id.in_(account_ids))
            .group_by(model.account_id)
            .all()
        )
        for account_id, n in rows:
            setattr(counts[account_id], field, n)
    return counts


def _get_account(db: Session, account_id: str) -> Account:
    account = db.get(Account, account_id)
    if account is None:
        raise NotFoundError("Account not found")
    return account


def _detail(db: Session, account: Account) -> AccountDetail:
    base = AccountOut.model_validate(account)
    contacts = (
        db.query(Contact).filter(Contact.account_id == account.id)
        .order_by(Contact.created_at.desc()).all()
    )
    projects = (
        db.query(Project).filter(Project.account_id == account.id)
        .order_by(Project.created_at.desc()).all()
    )
    cases = (
        db.query(Case).filter(Case.account_id == account.id)
        .order_by(Case.created_at.desc()).all()
    )
    return AccountDetail(
        **base.model_dump(exclude={"counts"}),
        counts=_counts(db, [account.id])[account.id],
        contacts=[ContactBrief.model_validate(c) for c in contacts],
        projects=[ProjectBrief.model_validate(p) for p in projects],
        cases=[CaseBrief.model_validate(c) for c in cases],
    )


def _save(db: Session, account: Account) -> None:
    try:
        with atomic(db):
            db.add(account)
            db.flush()
    except IntegrityError as e:
        raise ConflictError("Account name must be unique") from e


@router.get("", response_model=AccountsListResponse)
def list_accounts(
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> AccountsListResponse:
    require_authenticated(session)
    accounts = db.query(Account).order_by(Account.updated_at.desc()).all()
    counts = _counts(db, [a.id for a in accounts])
    return AccountsListResponse(
        accounts=[
            AccountOut.model_validate(a).model_copy(update={"counts": counts[a.id]})
            for a in accounts
        ]
    )


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    body: AccountCreate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> AccountResponse:
    session = require_member(session)
    account = Account(
        name=body.name,
        industry=body.industry,
        website=body.website,
        phone=body.phone,
        owner_id=resolve_owner_id(db, body.owner_id, session.user.id),
    )
    _save(db, account)
    return AccountResponse(account=_detail(db, account))


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> AccountResponse:
    require_authenticated(session)
    return AccountResponse(account=_detail(db, _get_account(db, account_id)))


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    body: AccountUpdate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> AccountResponse:
    """Apply only the fields present in the payload; an empty string clears optional fields."""
    session = require_member(session)
    account = _get_account(db, account_id)
    fields = body.model_fields_set
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "owner_id" in fields:
        account.owner_id = resolve_owner_id(db, body.owner_id, session.user.id)
    if "name" in fields:
        if body.name is None:
            raise InvalidInputError("name must not be empty")
        account.name = body.name
    for field in ("industry", "website", "phone"):
        if field in fields:
            setattr(account, field, getattr(body, field))
    _save(db, account)
    return AccountResponse(account=_detail(db, account))


@router.delete("/{account_id}", response_model=DeleteResponse)
def delete_account(
    account_id: str,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
):
    """Delete an account with no contacts, cases or projects; 409 lists the blockers otherwise."""
    require_member(session)
    account = _get_account(db, account_id)
    counts = _counts(db, [account.id])[account.id]
    blockers = [
        {"type": name, "count": n} for name, n in counts.model_dump().items() if n > 0
    ]
    if blockers:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": "Account has related records", "blockers": blockers},
        )
    with atomic(db):
        db.delete(account)
    return DeleteResponse()
