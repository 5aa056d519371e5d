"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.crm import Account, Case, Contact
from app.models.project import (
    Epic,
    Issue,
    IssueAssignee,
    IssueSprint,
    Project,
    ProjectMember,
    Sprint,
)
from app.models.user import User

__all__ = [
    "Account",
    "Base",
    "Case",
    "Contact",
    "Epic",
    "Issue",
    "IssueAssignee",
    "IssueSprint",
    "Project",
    "ProjectMember",
    "Sprint",
    "User",
]
