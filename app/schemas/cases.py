"""Schemas for cases (deals) and case conversion."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.models.enums import CaseStage
from app.schemas.common import AccountSummary, blank_to_none, upper_token


class ContactSummary(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    first_name: str
    last_name: str
    email: str | None = None


class CaseOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    title: str
    description: str | None = None
    stage: CaseStage
    account: AccountSummary | None = None
    contact: ContactSummary | None = None
    owner_id: str | None = None
    project_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CaseDetail(CaseOut):
    next_stage: CaseStage | None = None


class CaseResponse(BaseModel):
    case: CaseDetail


class CasesListResponse(BaseModel):
    cases: list[CaseOut]


class CaseCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: str | None = None
    account_id: str
    contact_id: str | None = None
    owner_id: str | None = None
    stage: CaseStage = CaseStage.LEAD

    @field_validator("title")
    @classmethod
    def require_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title is required")
        return v

    @field_validator("description", "contact_id", "owner_id", mode="before")
    @classmethod
    def strip_optional(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("stage", mode="before")
    @classmethod
    def normalize_stage(cls, v: object) -> object:
        return upper_token(v)


class CaseUpdate(BaseModel):
    """Any stage may be set; the pipeline order is a client-side suggestion only."""

    stage: CaseStage | None = None
    title: str | None = Field(default=None, max_length=255)
    description: str | None = None

    @field_validator("stage", mode="before")
    @classmethod
    def normalize_stage(cls, v: object) -> object:
        return upper_token(v)

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v: object) -> object:
        return blank_to_none(v)


class ConvertedProject(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str
    key: str


class ConvertResponse(BaseModel):
    project: ConvertedProject
