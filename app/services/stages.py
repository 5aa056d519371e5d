"""Pipeline ordering for case stages and issue statuses.

These give the "next step" a client can offer; the server itself accepts any
stage or status on update.
"""

from enum import Enum
from typing import TypeVar

from app.models.enums import CaseStage, IssueStatus

E = TypeVar("E", bound=Enum)

CASE_STAGE_SEQUENCE: tuple[CaseStage, ...] = tuple(CaseStage)
TERMINAL_CASE_STAGES: frozenset[CaseStage] = frozenset({CaseStage.WON, CaseStage.LOST})
ISSUE_STATUS_SEQUENCE: tuple[IssueStatus, ...] = tuple(IssueStatus)


def parse_enum(enum_cls: type[E], value: object) -> E | None:
    """Case-insensitive lookup by value; None when value is not a member."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value.strip().upper())
    except ValueError:
        return None


def next_case_stage(current: CaseStage | str) -> CaseStage | None:
    stage = parse_enum(CaseStage, current)
    if stage is None or stage in TERMINAL_CASE_STAGES:
        return None
    index = CASE_STAGE_SEQUENCE.index(stage)
    # NEGOTIATION -> WON; LOST is never suggested.
    return CASE_STAGE_SEQUENCE[index + 1]


def next_issue_status(current: IssueStatus | str) -> IssueStatus | None:
    status = parse_enum(IssueStatus, current)
    if status is None:
        return None
    index = ISSUE_STATUS_SEQUENCE.index(status)
    if index + 1 >= len(ISSUE_STATUS_SEQUENCE):
        return None
    return ISSUE_STATUS_SEQUENCE[index + 1]
