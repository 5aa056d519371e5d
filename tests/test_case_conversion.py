"""Case to project conversion: success path, single conversion, and rollback."""

import unittest
from unittest.mock import patch

from app.core.errors import (
    CaseAlreadyConvertedError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from app.models import Case, Project, ProjectMember
from app.services.case_conversion import convert_case_to_project
from support import (
    add_account,
    add_case,
    add_project,
    add_user,
    make_session_factory,
    session_for,
)


class TestConvertCaseToProject(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.actor = add_user(self.db, "actor@example.com", role="member")
        self.case_owner = add_user(self.db, "rep@example.com", role="member")
        self.outsider = add_user(self.db, "outsider@example.com", role="admin")
        self.account = add_account(self.db, "Acme Corp")
        # The actor reaches the unconverted case through a project on the same account.
        add_project(self.db, "ACME-OLD", account=self.account, members=((self.actor, "member"),))
        self.case = add_case(
            self.db, "Website rebuild", account=self.account, owner=self.case_owner,
        )

    def tearDown(self) -> None:
        self.db.close()

    def _counts(self) -> tuple[int, int]:
        return self.db.query(Project).count(), self.db.query(ProjectMember).count()

    def test_converts_case(self) -> None:
        project = convert_case_to_project(self.db, session_for(self.actor), self.case.id)

        self.db.expire_all()
        case = self.db.get(Case, self.case.id)
        self.assertEqual(case.stage, "WON")
        self.assertEqual(case.project_id, project.id)
        self.assertEqual(project.source_case_id, case.id)
        self.assertEqual(project.name, "Website rebuild")
        self.assertEqual(project.account_id, self.account.id)
        self.assertTrue(project.key.startswith("ACME-CORP-"))
        self.assertIsNotNone(project.start_date)

        roles = {
            m.user_id: m.role
            for m in self.db.query(ProjectMember).filter(ProjectMember.project_id == project.id)
        }
        self.assertEqual(roles, {self.actor.id: "manager", self.case_owner.id: "member"})

    def test_actor_who_owns_the_case_gets_one_membership(self) -> None:
        case = add_case(self.db, "Upsell", account=self.account, owner=self.actor)
        project = convert_case_to_project(self.db, session_for(self.actor), case.id)
        members = self.db.query(ProjectMember).filter(ProjectMember.project_id == project.id).all()
        self.assertEqual([(m.user_id, m.role) for m in members], [(self.actor.id, "manager")])

    def test_case_without_account_uses_title_for_key(self) -> None:
        case = add_case(self.db, "Quick win", project=None)
        with patch("app.services.case_conversion.can_access_case", return_value=True):
            project = convert_case_to_project(self.db, session_for(self.actor), case.id)
        self.assertTrue(project.key.startswith("QUICK-WIN-"))

    def test_second_conversion_is_rejected_without_new_rows(self) -> None:
        convert_case_to_project(self.db, session_for(self.actor), self.case.id)
        before = self._counts()
        with self.assertRaises(CaseAlreadyConvertedError) as ctx:
            convert_case_to_project(self.db, session_for(self.actor), self.case.id)
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(self._counts(), before)

    def test_no_session(self) -> None:
        with self.assertRaises(UnauthorizedError):
            convert_case_to_project(self.db, None, self.case.id)

    def test_unknown_case(self) -> None:
        with self.assertRaises(NotFoundError):
            convert_case_to_project(self.db, session_for(self.actor), "missing")

    def test_forbidden_without_access(self) -> None:
        before = self._counts()
        with self.assertRaises(ForbiddenError):
            convert_case_to_project(self.db, session_for(self.outsider), self.case.id)
        self.assertEqual(self._counts(), before)

    def test_failure_mid_transaction_rolls_back(self) -> None:
        before = self._counts()
        with patch(
            "app.services.case_conversion.add_members",
            side_effect=RuntimeError("membership insert failed"),
        ):
            with self.assertRaises(RuntimeError):
                convert_case_to_project(self.db, session_for(self.actor), self.case.id)

        self.db.expire_all()
        case = self.db.get(Case, self.case.id)
        self.assertIsNone(case.project_id)
        self.assertEqual(case.stage, "QUALIFIED")
        self.assertEqual(self._counts(), before)

    def test_project_committed_by_concurrent_conversion(self) -> None:
        # Another transaction already created a project from this case but the
        # case row still reads unconverted here; the unique source_case_id trips at flush.
        self.db.add(Project(key="RACE-1", name="Winner", source_case_id=self.case.id))
        self.db.commit()
        before = self._counts()

        with self.assertRaises(CaseAlreadyConvertedError) as ctx:
            convert_case_to_project(self.db, session_for(self.actor), self.case.id)
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(self._counts(), before)

        self.db.expire_all()
        case = self.db.get(Case, self.case.id)
        self.assertIsNone(case.project_id)
        self.assertEqual(case.stage, "QUALIFIED")

    def test_key_collision_at_insert_is_a_conflict(self) -> None:
        before = self._counts()
        with patch("app.services.case_conversion.new_project_key", return_value="ACME-OLD"):
            with self.assertRaises(ConflictError) as ctx:
                convert_case_to_project(self.db, session_for(self.actor), self.case.id)
        self.assertNotIsInstance(ctx.exception, CaseAlreadyConvertedError)
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(self._counts(), before)
        self.db.expire_all()
        self.assertIsNone(self.db.get(Case, self.case.id).project_id)
