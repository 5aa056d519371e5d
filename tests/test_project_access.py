"""Visibility resolver and project guard against an in-memory database."""

import unittest

from app.core.errors import ForbiddenError, UnauthorizedError
from app.services.project_access import (
    assert_project_access,
    can_access_case,
    has_account_project_membership,
    visible_cases_query,
    visible_project_ids,
)
from support import (
    add_account,
    add_case,
    add_project,
    add_user,
    make_session_factory,
    session_for,
)


class ProjectAccessTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.owner = add_user(self.db, "owner@example.com", role="viewer")
        self.member = add_user(self.db, "member@example.com", role="viewer")
        self.admin = add_user(self.db, "admin@example.com", role="admin")
        self.account = add_account(self.db, "Acme")
        self.p1 = add_project(
            self.db, "P1", owner=self.owner, account=self.account,
            members=((self.member, "viewer"),),
        )
        self.p2 = add_project(self.db, "P2", owner=self.owner)

    def tearDown(self) -> None:
        self.db.close()


class TestVisibleProjectIds(ProjectAccessTestCase):
    def test_membership_grants_visibility(self) -> None:
        self.assertEqual(visible_project_ids(self.db, self.member.id), {self.p1.id})

    def test_ownership_grants_visibility_without_membership(self) -> None:
        self.assertEqual(visible_project_ids(self.db, self.owner.id), {self.p1.id, self.p2.id})

    def test_admin_role_does_not_bypass(self) -> None:
        self.assertEqual(visible_project_ids(self.db, self.admin.id), set())

    def test_empty_user_id(self) -> None:
        self.assertEqual(visible_project_ids(self.db, ""), set())
        self.assertEqual(visible_project_ids(self.db, None), set())


class TestAssertProjectAccess(ProjectAccessTestCase):
    def test_no_session_is_unauthorized(self) -> None:
        with self.assertRaises(UnauthorizedError):
            assert_project_access(self.db, None, self.p1.id)

    def test_missing_project_id_is_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            assert_project_access(self.db, session_for(self.member), "")

    def test_invisible_project_is_forbidden_even_for_admin(self) -> None:
        with self.assertRaises(ForbiddenError):
            assert_project_access(self.db, session_for(self.admin), self.p1.id)
        with self.assertRaises(ForbiddenError):
            assert_project_access(self.db, session_for(self.member), self.p2.id)

    def test_visible_project_returns_session(self) -> None:
        session = session_for(self.member)
        self.assertIs(assert_project_access(self.db, session, self.p1.id), session)


class TestCaseVisibility(ProjectAccessTestCase):
    def test_account_bridge_applies_to_unconverted_cases(self) -> None:
        case = add_case(self.db, "Renewal", account=self.account)
        self.assertTrue(has_account_project_membership(self.db, self.member.id, self.account.id))
        self.assertTrue(can_access_case(self.db, session_for(self.member), case))
        self.assertFalse(can_access_case(self.db, session_for(self.admin), case))
        self.assertFalse(can_access_case(self.db, None, case))

    def test_converted_case_follows_its_project(self) -> None:
        case = add_case(self.db, "Pilot", project=self.p2)
        self.assertTrue(can_access_case(self.db, session_for(self.owner), case))
        self.assertFalse(can_access_case(self.db, session_for(self.member), case))

    def test_visible_cases_query(self) -> None:
        bridged = add_case(self.db, "Bridged", account=self.account)
        converted = add_case(self.db, "Converted", project=self.p1)
        other = add_case(self.db, "Other", account=add_account(self.db, "Globex"))
        ids = {c.id for c in visible_cases_query(self.db, self.member.id).all()}
        self.assertEqual(ids, {bridged.id, converted.id})
        self.assertNotIn(other.id, ids)
        self.assertEqual(visible_cases_query(self.db, self.admin.id).all(), [])
