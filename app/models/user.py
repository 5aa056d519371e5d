"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Boolean, Column, String

from app.models.base import Base, TimestampMixin, new_id


class User(TimestampMixin, Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'viewer', 'member', 'manager' or 'admin'. is_active gates login only.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, default="member")
    is_active = Column(Boolean, nullable=False, default=True)
