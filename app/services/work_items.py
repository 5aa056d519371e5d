"""Read helpers for epics, sprints and issues: counts and serialisation."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Epic, Issue, IssueSprint, Sprint
from app.schemas.projects import EpicOut, IssueOut, SprintOut
from app.services.stages import next_issue_status


def epic_issue_counts(db: Session, epic_ids: list[str]) -> dict[str, int]:
    if not epic_ids:
        return {}
    rows = (
        db.query(Issue.epic_id, func.count(Issue.id))
        .filter(Issue.epic_id.in_(epic_ids))
        .group_by(Issue.epic_id)
        .all()
    )
    return dict(rows)


def sprint_issue_counts(db: Session, sprint_ids: list[str]) -> dict[str, int]:
    if not sprint_ids:
        return {}
    rows = (
        db.query(IssueSprint.sprint_id, func.count(IssueSprint.id))
        .filter(IssueSprint.sprint_id.in_(sprint_ids))
        .group_by(IssueSprint.sprint_id)
        .all()
    )
    return dict(rows)


def epic_out(db: Session, epics: list[Epic]) -> list[EpicOut]:
    counts = epic_issue_counts(db, [e.id for e in epics])
    return [
        EpicOut.model_validate(e).model_copy(update={"issue_count": counts.get(e.id, 0)})
        for e in epics
    ]


def sprint_out(db: Session, sprints: list[Sprint]) -> list[SprintOut]:
    counts = sprint_issue_counts(db, [s.id for s in sprints])
    return [
        SprintOut.model_validate(s).model_copy(update={"issue_count": counts.get(s.id, 0)})
        for s in sprints
    ]


def issue_out(issue: Issue) -> IssueOut:
    out = IssueOut.model_validate(issue)
    return out.model_copy(update={"next_status": next_issue_status(out.status)})


def project_sprints(db: Session, project_id: str) -> list[Sprint]:
    return (
        db.query(Sprint)
        .filter(Sprint.project_id == project_id)
        .order_by(Sprint.start_date.asc(), Sprint.created_at.asc())
        .all()
    )
