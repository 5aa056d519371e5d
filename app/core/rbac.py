"""Authorization predicates over an explicitly passed session.

has_at_least is the rank comparison; role_in / assert_role are exact set
membership. The two are not interchangeable: ``role_in(s, {manager, admin})``
happens to equal ``has_at_least(s, manager)`` only because admin is the top
rank.
"""

from collections.abc import Iterable

from app.core.errors import AuthorizationError, UnauthorizedError
from app.core.roles import Role, parse_role, rank
from app.schemas.auth import AuthSession


def session_role(session: AuthSession | None) -> Role | None:
    """Recognised role of the session, or None (no session, missing or unknown role)."""
    if session is None or session.user is None:
        return None
    return parse_role(session.user.role)


def session_user_id(session: AuthSession | None) -> str | None:
    if session is None or session.user is None or not session.user.id:
        return None
    return session.user.id


def has_at_least(session: AuthSession | None, minimum: Role) -> bool:
    """True iff the session has a recognised role ranked at or above minimum."""
    role = session_role(session)
    if role is None:
        return False
    return rank(role) >= rank(minimum)


def is_admin(session: AuthSession | None) -> bool:
    return has_at_least(session, Role.ADMIN)


def has_role(session: AuthSession | None, role: Role) -> bool:
    return session_role(session) == role


def role_in(session: AuthSession | None, roles: Role | Iterable[Role]) -> bool:
    """True iff the session role is exactly one of roles."""
    allowed = {roles} if isinstance(roles, Role) else set(roles)
    role = session_role(session)
    return role is not None and role in allowed


def assert_role(session: AuthSession | None, allowed: Role | Iterable[Role]) -> AuthSession:
    """Guard form of role_in for the top of a mutating operation."""
    if session is None or not role_in(session, allowed):
        raise AuthorizationError()
    return session


def require_authenticated(session: AuthSession | None) -> AuthSession:
    """Return the session, or raise UnauthorizedError when there is none."""
    if session_user_id(session) is None:
        raise UnauthorizedError()
    return session
