"""Configuration, database sessions, security and the authorization model."""

from app.core.config import get_settings, settings
from app.core.database import atomic, get_db
from app.core.errors import CRMError

__all__ = ["CRMError", "atomic", "get_db", "get_settings", "settings"]
