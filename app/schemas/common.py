"""Shared schema pieces: user/account summaries and input normalisers."""

from datetime import UTC, datetime

from pydantic import BaseModel


def upper_token(value: object) -> object:
    """Trim and upper-case enum inputs so 'won ' and 'WON' are the same stage."""
    if isinstance(value, str):
        return value.strip().upper()
    return value


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are read as UTC so every comparison is between aware values."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def blank_to_none(value: object) -> object:
    """Trim strings; an empty string clears the field."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class UserSummary(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str | None = None
    email: str


class AccountSummary(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str
