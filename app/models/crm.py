"""ORM models for the sales side: accounts, contacts and cases (deals)."""

from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, new_id
from app.models.enums import CaseStage


class Account(TimestampMixin, Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, unique=True)
    industry = Column(String(255), nullable=True)
    website = Column(String(1024), nullable=True)
    phone = Column(String(64), nullable=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    owner = relationship("User")


class Contact(TimestampMixin, Base):
    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=new_id)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True, index=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    phone = Column(String(64), nullable=True)

    account = relationship("Account")
    owner = relationship("User")


class Case(TimestampMixin, Base):
    """
    A deal moving through the CaseStage pipeline.

    project_id is null until the case is converted; conversion sets it once
    and forces the stage to WON.
    """

    __tablename__ = "cases"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    stage = Column(String(32), nullable=False, default=CaseStage.LEAD.value, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True, index=True)
    contact_id = Column(String(36), ForeignKey("contacts.id"), nullable=True, index=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=True, unique=True)

    account = relationship("Account")
    contact = relationship("Contact")
    owner = relationship("User")
