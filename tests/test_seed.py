"""Demo seed: loads the full dataset and can be re-run without duplicating rows."""

import unittest

from app.core.config import Settings
from app.core.security import verify_password
from app.models import Case, Epic, Issue, IssueAssignee, IssueSprint, Project, ProjectMember, Sprint, User
from app.scripts.seed import seed
from app.services.project_access import visible_project_ids
from support import make_session_factory

COUNTED = (User, Project, ProjectMember, Epic, Sprint, Issue, IssueAssignee, IssueSprint, Case)


class TestSeed(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.settings = Settings(
            SEED_ADMIN_EMAIL="Boss@Example.com",
            SEED_ADMIN_PASSWORD="admin-password",
            SEED_USER_PASSWORD="user-password",
        )

    def tearDown(self) -> None:
        self.db.close()

    def _counts(self) -> dict[str, int]:
        return {model.__name__: self.db.query(model).count() for model in COUNTED}

    def test_seed_is_idempotent(self) -> None:
        seed(self.db, self.settings)
        first = self._counts()
        self.assertEqual(
            first,
            {
                "User": 4, "Project": 1, "ProjectMember": 4, "Epic": 2, "Sprint": 1,
                "Issue": 3, "IssueAssignee": 3, "IssueSprint": 3, "Case": 1,
            },
        )
        seed(self.db, self.settings)
        self.assertEqual(self._counts(), first)

    def test_seeded_users_can_sign_in_and_see_the_project(self) -> None:
        users = seed(self.db, self.settings)
        admin = self.db.query(User).filter(User.email == "boss@example.com").one()
        self.assertTrue(verify_password("admin-password", admin.password_hash))
        for user in users.values():
            self.assertEqual(visible_project_ids(self.db, user.id), {"seed-project"})
        self.assertEqual(self.db.get(Case, "seed-case").stage, "QUALIFIED")
