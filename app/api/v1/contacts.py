"""Contact endpoints: list, detail, create, update, delete."""

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
from app.models import Account, Case, Contact
from app.schemas.accounts import (
    CaseBrief,
    ContactCreate,
    ContactDetail,
    ContactOut,
    ContactResponse,
    ContactsListResponse,
    ContactUpdate,
)
from app.schemas.auth import AuthSession
from app.schemas.users import DeleteResponse
from app.services.users import resolve_owner_id

router = APIRouter()


def _case_counts(db: Session, contact_ids: list[str]) -> dict[str, int]:
    if not contact_ids:
        return {}
    rows = (
        db.query(Case.contact_id, func.count(Case.id))
        .filter(Case.contact_id.in_(contact_ids))
        .group_by(Case.contact_id)
        .all()
    )
    return dict(rows)


def _check_account(db: Session, account_id: str | None) -> None:
    if account_id and db.get(Account, account_id) is None:
        raise InvalidInputError("account_id is invalid")


def _get_contact(db: Session, contact_id: str) -> Contact:
    contact = db.get(Contact, contact_id)
    if contact is None:
        raise NotFoundError("Contact not found")
    return contact


def _detail(db: Session, contact: Contact) -> ContactDetail:
    cases = (
        db.query(Case).filter(Case.contact_id == contact.id)
        .order_by(Case.created_at.desc()).all()
    )
    base = ContactOut.model_validate(contact)
    return ContactDetail(
        **base.model_dump(exclude={"case_count"}),
        case_count=len(cases),
        cases=[CaseBrief.model_validate(c) for c in cases],
    )


def _save(db: Session, contact: Contact) -> None:
    try:
        with atomic(db):
            db.add(contact)
            db.flush()
    except IntegrityError as e:
        raise ConflictError("email must be unique") from e


@router.get("", response_model=ContactsListResponse)
def list_contacts(
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> ContactsListResponse:
    require_authenticated(session)
    contacts = db.query(Contact).order_by(Contact.updated_at.desc()).all()
    counts = _case_counts(db, [c.id for c in contacts])
    return ContactsListResponse(
        contacts=[
            ContactOut.model_validate(c).model_copy(update={"case_count": counts.get(c.id, 0)})
            for c in contacts
        ]
    )


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def create_contact(
    body: ContactCreate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> ContactResponse:
    session = require_member(session)
    _check_account(db, body.account_id)
    contact = Contact(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        phone=body.phone,
        account_id=body.account_id,
        owner_id=resolve_owner_id(db, body.owner_id, session.user.id),
    )
    _save(db, contact)
    return ContactResponse(contact=_detail(db, contact))


@router.get("/{contact_id}", response_model=ContactResponse)
def get_contact(
    contact_id: str,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> ContactResponse:
    require_authenticated(session)
    return ContactResponse(contact=_detail(db, _get_contact(db, contact_id)))


@router.patch("/{contact_id}", response_model=ContactResponse)
def update_contact(
    contact_id: str,
    body: ContactUpdate,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
) -> ContactResponse:
    session = require_member(session)
    contact = _get_contact(db, contact_id)
    fields = body.model_fields_set
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "account_id" in fields:
        _check_account(db, body.account_id)
        contact.account_id = body.account_id
    if "owner_id" in fields:
        contact.owner_id = resolve_owner_id(db, body.owner_id, session.user.id)
    for field in ("first_name", "last_name"):
        if field in fields:
            value = getattr(body, field)
            if value is None:
                raise InvalidInputError(f"{field} must not be empty")
            setattr(contact, field, value)
    for field in ("email", "phone"):
        if field in fields:
            setattr(contact, field, getattr(body, field))
    _save(db, contact)
    return ContactResponse(contact=_detail(db, contact))


@router.delete("/{contact_id}", response_model=DeleteResponse)
def delete_contact(
    contact_id: str,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[AuthSession | None, Depends(get_session)],
):
    require_member(session)
    contact = _get_contact(db, contact_id)
    case_count = _case_counts(db, [contact.id]).get(contact.id, 0)
    if case_count:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "detail": "Contact has related records",
                "blockers": [{"type": "cases", "count": case_count}],
            },
        )
    with atomic(db):
        db.delete(contact)
    return DeleteResponse()
