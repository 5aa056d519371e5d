"""Role model: four totally ordered roles and their rank."""

from enum import Enum


class Role(str, Enum):
    """User roles, lowest to highest."""

    VIEWER = "viewer"
    MEMBER = "member"
    MANAGER = "manager"
    ADMIN = "admin"


_RANK: dict[Role, int] = {
    Role.VIEWER: 0,
    Role.MEMBER: 1,
    Role.MANAGER: 2,
    Role.ADMIN: 3,
}

# Highest first, for admin role pickers.
ROLE_OPTIONS: tuple[Role, ...] = (Role.ADMIN, Role.MANAGER, Role.MEMBER, Role.VIEWER)


def rank(role: Role) -> int:
    """Return the ordinal of a role; a higher rank holds every lower-rank capability."""
    return _RANK[role]


def parse_role(value: object) -> Role | None:
    """
    Map a raw role value to a Role, or None when it is not one of the four.

    Unknown values are never defaulted to some rank; callers treat None as
    "no authorization".
    """
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value.strip().lower())
    except ValueError:
        return None
