"""ORM models for project tracking: projects, members, epics, sprints and issues."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, new_id
from app.models.enums import IssuePriority, IssueStatus, IssueType, SprintStatus


class Project(TimestampMixin, Base):
    """
    A project. Visibility comes from ProjectMember rows and owner_id, never
    from the caller's global role.

    source_case_id is unique so a case can produce at most one project even
    when two conversions race.
    """

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=new_id)
    key = Column(String(32), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True, index=True)
    source_case_id = Column(String(36), nullable=True, unique=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)

    owner = relationship("User")
    account = relationship("Account")


class ProjectMember(TimestampMixin, Base):
    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(32), nullable=False, default="member")

    user = relationship("User")


class Epic(TimestampMixin, Base):
    __tablename__ = "epics"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)


class Sprint(TimestampMixin, Base):
    __tablename__ = "sprints"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    goal = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default=SprintStatus.PLANNED.value)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)


class Issue(TimestampMixin, Base):
    __tablename__ = "issues"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    epic_id = Column(String(36), ForeignKey("epics.id"), nullable=True, index=True)
    reporter_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default=IssueStatus.TO_DO.value, index=True)
    priority = Column(String(32), nullable=False, default=IssuePriority.MEDIUM.value)
    type = Column(String(32), nullable=False, default=IssueType.TASK.value)
    due_date = Column(DateTime(timezone=True), nullable=True)

    assignees = relationship("User", secondary="issue_assignees", viewonly=True)


class IssueAssignee(Base):
    __tablename__ = "issue_assignees"
    __table_args__ = (
        UniqueConstraint("issue_id", "user_id", name="uq_issue_assignees_issue_user"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    issue_id = Column(String(36), ForeignKey("issues.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)


class IssueSprint(Base):
    __tablename__ = "issue_sprints"
    __table_args__ = (
        UniqueConstraint("issue_id", "sprint_id", name="uq_issue_sprints_issue_sprint"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    issue_id = Column(String(36), ForeignKey("issues.id"), nullable=False, index=True)
    sprint_id = Column(String(36), ForeignKey("sprints.id"), nullable=False, index=True)
