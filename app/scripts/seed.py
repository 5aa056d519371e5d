"""
Load demo data. Safe to re-run: rows are upserted by fixed id (users by email).

  python -m app.scripts.seed

Credentials come from SEED_ADMIN_EMAIL, SEED_ADMIN_PASSWORD and SEED_USER_PASSWORD.
"""

import logging
import sys
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import SessionLocal, atomic
from app.core.roles import Role
from app.core.security import hash_password
from app.models import (
    Account,
    Case,
    Contact,
    Epic,
    Issue,
    IssueAssignee,
    IssueSprint,
    Project,
    ProjectMember,
    Sprint,
    User,
)
from app.models.enums import CaseStage, IssuePriority, IssueStatus, IssueType, SprintStatus

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

DEMO_USERS = (
    ("manager@local.test", "Manager User", Role.MANAGER),
    ("member@local.test", "Member User", Role.MEMBER),
    ("viewer@local.test", "Viewer User", Role.VIEWER),
)


def _day(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=UTC)


def _upsert_user(db: Session, email: str, name: str, role: Role, password_hash: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email)
        db.add(user)
    user.name = name
    user.role = role.value
    user.password_hash = password_hash
    user.is_active = True
    db.flush()
    return user


def seed(db: Session, settings: Settings) -> dict[str, User]:
    """Upsert the demo dataset inside one transaction; returns the seeded users by role."""
    with atomic(db):
        users = {
            Role.ADMIN: _upsert_user(
                db,
                settings.SEED_ADMIN_EMAIL,
                "Admin",
                Role.ADMIN,
                hash_password(settings.SEED_ADMIN_PASSWORD.get_secret_value()),
            )
        }
        user_hash = hash_password(settings.SEED_USER_PASSWORD.get_secret_value())
        for email, name, role in DEMO_USERS:
            users[role] = _upsert_user(db, email, name, role, user_hash)
        admin, manager, member, viewer = (
            users[Role.ADMIN], users[Role.MANAGER], users[Role.MEMBER], users[Role.VIEWER]
        )

        # merge() inserts or updates by primary key.
        db.merge(Account(
            id="seed-account", name="Acme Corporation", industry="Software",
            website="https://acme.example.com", phone="+1-555-0100", owner_id=admin.id,
        ))
        db.merge(Contact(
            id="seed-contact", account_id="seed-account", owner_id=manager.id,
            first_name="Jane", last_name="Doe", email="jane.doe@acme.test", phone="+1-555-0101",
        ))
        db.merge(Project(
            id="seed-project", key="CRMREV", name="CRM Platform Revamp",
            description="Foundational project to enhance the CRM experience.",
            owner_id=admin.id, account_id="seed-account",
            start_date=_day("2025-01-01"), end_date=_day("2025-03-31"),
        ))
        db.flush()
        for suffix, user, role in (
            ("admin", admin, "owner"),
            ("manager", manager, "manager"),
            ("member", member, "member"),
            ("viewer", viewer, "viewer"),
        ):
            db.merge(ProjectMember(
                id=f"seed-pm-{suffix}", project_id="seed-project", user_id=user.id, role=role,
            ))
        db.merge(Epic(
            id="seed-epic-foundation", project_id="seed-project", name="Foundation Setup",
            description="Core platform and authentication baseline.",
        ))
        db.merge(Epic(
            id="seed-epic-expansion", project_id="seed-project", name="Expansion Initiatives",
            description="Enhancements to extend CRM value.",
        ))
        db.merge(Sprint(
            id="seed-sprint", project_id="seed-project", name="Sprint 1",
            goal="Deliver onboarding flow and analytics baseline.",
            status=SprintStatus.ACTIVE.value,
            start_date=_day("2025-01-06"), end_date=_day("2025-01-24"),
        ))
        db.flush()

        issues = (
            ("seed-issue-todo", "seed-epic-foundation", admin, manager,
             "Implement authentication flow", "Set up credential-based auth with session handoff.",
             IssueStatus.TO_DO, IssuePriority.HIGH, IssueType.FEATURE, "2025-01-15"),
            ("seed-issue-progress", "seed-epic-expansion", manager, member,
             "Integrate analytics dashboard", "Embed KPI widgets for active accounts.",
             IssueStatus.IN_PROGRESS, IssuePriority.MEDIUM, IssueType.TASK, "2025-01-20"),
            ("seed-issue-done", "seed-epic-foundation", member, admin,
             "Fix lead import bug", "Resolve CSV parsing issue for bulk imports.",
             IssueStatus.DONE, IssuePriority.URGENT, IssueType.BUG, "2024-12-20"),
        )
        for n, (issue_id, epic_id, reporter, assignee, title, description,
                status, priority, issue_type, due) in enumerate(issues, start=1):
            db.merge(Issue(
                id=issue_id, project_id="seed-project", epic_id=epic_id,
                reporter_id=reporter.id, title=title, description=description,
                status=status.value, priority=priority.value, type=issue_type.value,
                due_date=_day(due),
            ))
            db.flush()
            db.merge(IssueAssignee(id=f"seed-ia-{n}", issue_id=issue_id, user_id=assignee.id))
            db.merge(IssueSprint(id=f"seed-is-{n}", issue_id=issue_id, sprint_id="seed-sprint"))

        db.merge(Case(
            id="seed-case", title="Rollout onboarding playbook",
            description="Drive adoption for enterprise pilot.",
            account_id="seed-account", contact_id="seed-contact", owner_id=manager.id,
            stage=CaseStage.QUALIFIED.value,
        ))
    return users


def main() -> int:
    settings = get_settings()
    db = SessionLocal()
    try:
        seed(db, settings)
        logger.info("Seeded core data. Admin: %s", settings.SEED_ADMIN_EMAIL)
        return 0
    except Exception as e:
        logger.exception("Seed failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
