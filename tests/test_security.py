"""Password hashing, JWT session tokens and settings validation."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt
from pydantic import ValidationError

from app.core.config import Settings, settings
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    normalize_email,
    verify_password,
)


class TestPasswords(unittest.TestCase):
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("correct horse")
        self.assertNotEqual(hashed, "correct horse")
        self.assertTrue(verify_password("correct horse", hashed))
        self.assertFalse(verify_password("wrong horse", hashed))

    def test_missing_or_malformed_hash_never_matches(self) -> None:
        self.assertFalse(verify_password("anything", None))
        self.assertFalse(verify_password("anything", ""))
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))

    def test_normalize_email(self) -> None:
        self.assertEqual(normalize_email("  Jane.Doe@Example.COM "), "jane.doe@example.com")


class TestAccessTokens(unittest.TestCase):
    def test_round_trip_claims(self) -> None:
        token = create_access_token(sub="user-1", role="manager", email="m@example.com", name="M")
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], "user-1")
        self.assertEqual(payload["role"], "manager")
        self.assertEqual(payload["email"], "m@example.com")
        self.assertEqual(payload["name"], "M")
        self.assertIn("exp", payload)
        self.assertIn("iat", payload)

    def test_expired_token_is_rejected(self) -> None:
        past = datetime.now(UTC) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": "user-1", "role": "admin", "exp": past, "iat": past},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_foreign_signature_is_rejected(self) -> None:
        token = jwt.encode({"sub": "user-1"}, "some-other-secret-0123456789abcdef", algorithm="HS256")
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(token)


class TestSettingsValidation(unittest.TestCase):
    def test_rejects_non_postgres_url(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(DATABASE_URL="mysql://localhost/crm")

    def test_rejects_out_of_range_key_attempts(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(PROJECT_KEY_MAX_ATTEMPTS=0)

    def test_seed_admin_email_is_normalized(self) -> None:
        self.assertEqual(Settings(SEED_ADMIN_EMAIL=" Boss@Example.com ").SEED_ADMIN_EMAIL, "boss@example.com")

    def test_database_url_pins_psycopg2_driver(self) -> None:
        for url in (
            "postgres://u:p@db:5432/crm",
            "postgresql://u:p@db:5432/crm",
            "postgres+psycopg2://u:p@db:5432/crm",
            "postgresql+psycopg2://u:p@db:5432/crm",
        ):
            with self.subTest(url=url):
                self.assertEqual(
                    Settings(DATABASE_URL=url).DATABASE_URL,
                    "postgresql+psycopg2://u:p@db:5432/crm",
                )
        self.assertTrue(settings.DATABASE_URL.startswith("postgresql+psycopg2://"))
