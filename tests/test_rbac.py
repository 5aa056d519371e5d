"""Unit tests for the role model and authorization predicates."""

import unittest

from app.core.errors import AuthorizationError, ForbiddenError, UnauthorizedError
from app.core.rbac import (
    assert_role,
    has_at_least,
    has_role,
    is_admin,
    require_authenticated,
    role_in,
    session_user_id,
)
from app.core.roles import ROLE_OPTIONS, Role, parse_role, rank
from app.schemas.auth import AuthSession, SessionUser


def _session(role: str, user_id: str = "u1") -> AuthSession:
    return AuthSession(user=SessionUser(id=user_id, email=f"{user_id}@example.com", role=role))


class TestRoleRank(unittest.TestCase):
    def test_ranks_are_totally_ordered(self) -> None:
        ranks = [rank(r) for r in (Role.VIEWER, Role.MEMBER, Role.MANAGER, Role.ADMIN)]
        self.assertEqual(ranks, [0, 1, 2, 3])

    def test_role_options_highest_first(self) -> None:
        self.assertEqual(ROLE_OPTIONS[0], Role.ADMIN)
        self.assertEqual(ROLE_OPTIONS[-1], Role.VIEWER)

    def test_parse_role_normalizes_case_and_whitespace(self) -> None:
        self.assertEqual(parse_role(" Manager "), Role.MANAGER)
        self.assertEqual(parse_role(Role.VIEWER), Role.VIEWER)

    def test_parse_role_rejects_unknown_values(self) -> None:
        for value in ("owner", "superuser", "", None, 3):
            with self.subTest(value=value):
                self.assertIsNone(parse_role(value))


class TestHasAtLeast(unittest.TestCase):
    def test_matches_rank_comparison_for_every_pair(self) -> None:
        for held in Role:
            for minimum in Role:
                with self.subTest(held=held, minimum=minimum):
                    self.assertEqual(
                        has_at_least(_session(held.value), minimum),
                        rank(held) >= rank(minimum),
                    )

    def test_examples(self) -> None:
        self.assertTrue(has_at_least(_session("manager"), Role.MEMBER))
        self.assertFalse(has_at_least(_session("viewer"), Role.MANAGER))

    def test_unknown_role_or_missing_session_fails_closed(self) -> None:
        self.assertFalse(has_at_least(None, Role.VIEWER))
        self.assertFalse(has_at_least(_session("root"), Role.VIEWER))
        self.assertFalse(has_at_least(_session(""), Role.VIEWER))

    def test_is_admin(self) -> None:
        self.assertTrue(is_admin(_session("admin")))
        self.assertFalse(is_admin(_session("manager")))


class TestRoleSetMembership(unittest.TestCase):
    def test_role_in_is_exact_membership(self) -> None:
        allowed = {Role.MANAGER}
        self.assertTrue(role_in(_session("manager"), allowed))
        # Admin outranks manager but is not in the set.
        self.assertFalse(role_in(_session("admin"), allowed))

    def test_role_in_accepts_single_role(self) -> None:
        self.assertTrue(role_in(_session("viewer"), Role.VIEWER))
        self.assertFalse(role_in(None, Role.VIEWER))

    def test_has_role(self) -> None:
        self.assertTrue(has_role(_session("member"), Role.MEMBER))
        self.assertFalse(has_role(_session("manager"), Role.MEMBER))

    def test_assert_role_returns_session(self) -> None:
        session = _session("admin")
        self.assertIs(assert_role(session, [Role.ADMIN, Role.MANAGER]), session)

    def test_assert_role_raises_authorization_error(self) -> None:
        with self.assertRaises(AuthorizationError) as ctx:
            assert_role(_session("member"), [Role.ADMIN, Role.MANAGER])
        self.assertIsInstance(ctx.exception, ForbiddenError)
        self.assertEqual(ctx.exception.status_code, 403)
        with self.assertRaises(AuthorizationError):
            assert_role(None, Role.ADMIN)


class TestRequireAuthenticated(unittest.TestCase):
    def test_missing_session_is_unauthorized(self) -> None:
        with self.assertRaises(UnauthorizedError) as ctx:
            require_authenticated(None)
        self.assertEqual(ctx.exception.status_code, 401)

    def test_returns_session(self) -> None:
        session = _session("viewer", user_id="abc")
        self.assertIs(require_authenticated(session), session)
        self.assertEqual(session_user_id(session), "abc")
        self.assertIsNone(session_user_id(None))
