"""Schemas for projects, memberships, epics, sprints and issues."""

from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.enums import IssuePriority, IssueStatus, IssueType, SprintStatus
from app.schemas.common import AccountSummary, UserSummary, as_utc, blank_to_none, upper_token


def _required_text(v: str, field: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{field} is required")
    return v


class ProjectOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    key: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectsListResponse(BaseModel):
    projects: list[ProjectOut]


class SprintOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    project_id: str
    name: str
    goal: str | None = None
    status: SprintStatus
    start_date: datetime | None = None
    end_date: datetime | None = None
    issue_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectDetail(ProjectOut):
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    owner: UserSummary | None = None
    account: AccountSummary | None = None
    sprints: list[SprintOut] = Field(default_factory=list)


class ProjectResponse(BaseModel):
    project: ProjectDetail


class ProjectCreate(BaseModel):
    name: str = Field(..., max_length=255)
    key: str | None = Field(default=None, max_length=32)
    description: str | None = None
    account_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("name")
    @classmethod
    def require_name(cls, v: str) -> str:
        return _required_text(v, "name")

    @field_validator("key", mode="before")
    @classmethod
    def normalize_key(cls, v: object) -> object:
        return blank_to_none(upper_token(v))

    @field_validator("description", "account_id", mode="before")
    @classmethod
    def strip_optional(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_as_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class ProjectUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str | None) -> str | None:
        return None if v is None else _required_text(v, "name")

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_as_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class MemberOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    project_id: str
    user_id: str
    role: str
    user: UserSummary | None = None


class MembersListResponse(BaseModel):
    members: list[MemberOut]


class MemberCreate(BaseModel):
    user_id: str
    role: str = "member"

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v


class MemberResponse(BaseModel):
    member: MemberOut


class EpicOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    project_id: str
    name: str
    description: str | None = None
    issue_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EpicResponse(BaseModel):
    epic: EpicOut


class EpicsListResponse(BaseModel):
    epics: list[EpicOut]


class EpicCreate(BaseModel):
    name: str = Field(..., max_length=255)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def require_name(cls, v: str) -> str:
        return _required_text(v, "name")

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v: object) -> object:
        return blank_to_none(v)


class EpicUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str | None) -> str | None:
        return None if v is None else _required_text(v, "name")

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v: object) -> object:
        return blank_to_none(v)


class SprintResponse(BaseModel):
    sprint: SprintOut


class SprintsListResponse(BaseModel):
    sprints: list[SprintOut]


class SprintCreate(BaseModel):
    name: str = Field(..., max_length=255)
    goal: str | None = None
    status: SprintStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("name")
    @classmethod
    def require_name(cls, v: str) -> str:
        return _required_text(v, "name")

    @field_validator("goal", mode="before")
    @classmethod
    def strip_goal(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_as_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: object) -> object:
        return upper_token(v)

    @model_validator(mode="after")
    def check_dates(self) -> Self:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


class SprintStatusUpdate(BaseModel):
    status: SprintStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: object) -> object:
        return upper_token(v)


class IssueOut(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    project_id: str
    epic_id: str | None = None
    title: str
    description: str | None = None
    status: IssueStatus
    priority: IssuePriority
    type: IssueType
    due_date: datetime | None = None
    assignees: list[UserSummary] = Field(default_factory=list)
    next_status: IssueStatus | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class IssueResponse(BaseModel):
    issue: IssueOut


class IssuesListResponse(BaseModel):
    issues: list[IssueOut]


class IssueCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: str | None = None
    priority: IssuePriority | None = None
    type: IssueType | None = None
    epic_id: str | None = None
    due_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def require_title(cls, v: str) -> str:
        return _required_text(v, "title")

    @field_validator("priority", "type", mode="before")
    @classmethod
    def normalize_enum(cls, v: object) -> object:
        return upper_token(v)

    @field_validator("epic_id", mode="before")
    @classmethod
    def strip_epic(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("due_date")
    @classmethod
    def dates_as_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class IssueStatusUpdate(BaseModel):
    status: IssueStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: object) -> object:
        return upper_token(v)
