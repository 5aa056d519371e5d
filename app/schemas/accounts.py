"""Schemas for accounts and contacts."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import AccountSummary, UserSummary, blank_to_none


class RecordCounts(BaseModel):
    contacts: int = 0
    cases: int = 0
    projects: int = 0


class Blocker(BaseModel):
    type: str
    count: int


class AccountOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str
    industry: str | None = None
    website: str | None = None
    phone: str | None = None
    owner: UserSummary | None = None
    counts: RecordCounts = Field(default_factory=RecordCounts)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContactBrief(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None


class ProjectBrief(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    key: str
    name: str


class CaseBrief(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    title: str
    stage: str


class AccountDetail(AccountOut):
    contacts: list[ContactBrief] = Field(default_factory=list)
    projects: list[ProjectBrief] = Field(default_factory=list)
    cases: list[CaseBrief] = Field(default_factory=list)


class AccountResponse(BaseModel):
    account: AccountDetail


class AccountsListResponse(BaseModel):
    accounts: list[AccountOut]


class _AccountFields(BaseModel):
    industry: str | None = Field(default=None, max_length=255)
    website: str | None = Field(default=None, max_length=1024)
    phone: str | None = Field(default=None, max_length=64)
    owner_id: str | None = None

    @field_validator("industry", "website", "phone", "owner_id", mode="before")
    @classmethod
    def strip_optional(cls, v: object) -> object:
        return blank_to_none(v)


class AccountCreate(_AccountFields):
    name: str = Field(..., max_length=255)

    @field_validator("name")
    @classmethod
    def require_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v


class AccountUpdate(_AccountFields):
    """Only fields present in the payload are applied (model_fields_set)."""

    name: str | None = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v


class ContactOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    account_id: str | None = None
    owner_id: str | None = None
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    account: AccountSummary | None = None
    owner: UserSummary | None = None
    case_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContactDetail(ContactOut):
    cases: list[CaseBrief] = Field(default_factory=list)


class ContactResponse(BaseModel):
    contact: ContactDetail


class ContactsListResponse(BaseModel):
    contacts: list[ContactOut]


class _ContactFields(BaseModel):
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=64)
    account_id: str | None = None
    owner_id: str | None = None

    @field_validator("email", "phone", "account_id", "owner_id", mode="before")
    @classmethod
    def strip_optional(cls, v: object) -> object:
        return blank_to_none(v)


class ContactCreate(_ContactFields):
    first_name: str = Field(..., max_length=255)
    last_name: str = Field(..., max_length=255)

    @field_validator("first_name", "last_name")
    @classmethod
    def require_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("first_name and last_name are required")
        return v


class ContactUpdate(_ContactFields):
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)

    @field_validator("first_name", "last_name")
    @classmethod
    def names_not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name fields must not be empty")
        return v
