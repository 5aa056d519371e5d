"""Unit tests for project key generation."""

import re
import unittest
from unittest.mock import patch

from app.services.project_keys import generate_project_key, slugify_key

KEY_PATTERN = re.compile(r"^[A-Z0-9-]{1,12}-[0-9A-Z]{4}$")


class TestSlugifyKey(unittest.TestCase):
    def test_upper_cases_and_collapses_separators(self) -> None:
        self.assertEqual(slugify_key("Acme Corp., Inc"), "ACME-CORP-IN")

    def test_strips_leading_and_trailing_dashes(self) -> None:
        self.assertEqual(slugify_key("  --beta!! "), "BETA")

    def test_truncates_to_twelve(self) -> None:
        self.assertEqual(len(slugify_key("International Widgets")), 12)

    def test_empty_input(self) -> None:
        self.assertEqual(slugify_key(""), "")
        self.assertEqual(slugify_key(None), "")


class TestGenerateProjectKey(unittest.TestCase):
    def test_first_free_candidate_is_returned(self) -> None:
        key = generate_project_key("Acme", lambda _: False)
        self.assertTrue(key.startswith("ACME-"))
        self.assertRegex(key, KEY_PATTERN)

    def test_blank_base_uses_default_slug(self) -> None:
        key = generate_project_key("!!!", lambda _: False)
        self.assertTrue(key.startswith("PROJ-"))

    def test_retries_until_free(self) -> None:
        taken = {"ACME-AAAA", "ACME-BBBB"}
        with patch(
            "app.services.project_keys._random_suffix",
            side_effect=["AAAA", "BBBB", "CCCC"],
        ):
            key = generate_project_key("acme", lambda k: k in taken)
        self.assertEqual(key, "ACME-CCCC")

    def test_falls_back_to_uuid_key_after_max_attempts(self) -> None:
        seen = []

        def key_exists(candidate: str) -> bool:
            seen.append(candidate)
            return True

        with patch("app.services.project_keys._random_suffix", return_value="ZZZZ"):
            key = generate_project_key("Acme", key_exists, max_attempts=3)
        self.assertEqual(len(seen), 3)
        self.assertRegex(key, r"^PROJ-[0-9A-F]{8}$")
