"""SQLAlchemy declarative Base and shared model configuration."""

import uuid

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase


def new_id() -> str:
    """Opaque string primary key (UUID4 text)."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class TimestampMixin:
    """created_at / updated_at maintained by the database."""

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
