"""Unit tests for volterra.core.config.Settings validation."""

import unittest

from pydantic import ValidationError

from volterra.core.config import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        s = _settings(DATABASE_URL="sqlite://")
        self.assertEqual(s.SESSION_COOKIE_NAME, "volterra-session")
        self.assertEqual(s.SESSION_MAX_AGE_SECONDS, 7 * 24 * 60 * 60)
        self.assertEqual(s.API_PREFIX, "/api")

    def test_rejects_unsupported_database_url(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://root@localhost/volterra")

    def test_accepts_postgres_url(self) -> None:
        s = _settings(DATABASE_URL=" postgresql://u:p@db:5432/volterra ")
        self.assertEqual(s.DATABASE_URL, "postgresql://u:p@db:5432/volterra")

    def test_rejects_blank_secret(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite://", JWT_SECRET="  ")

    def test_session_max_age_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite://", SESSION_MAX_AGE_SECONDS=5)
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite://", SESSION_MAX_AGE_SECONDS=60 * 60 * 24 * 31)

    def test_api_prefix_normalized(self) -> None:
        self.assertEqual(_settings(DATABASE_URL="sqlite://", API_PREFIX="/api/").API_PREFIX, "/api")
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite://", API_PREFIX="api")

    def test_cors_origins_split(self) -> None:
        s = _settings(
            DATABASE_URL="sqlite://",
            CORS_ORIGINS="https://admin.volterra.example, ,https://volterra.example",
        )
        self.assertEqual(s.cors_origins, ["https://admin.volterra.example", "https://volterra.example"])

    def test_secure_cookie_only_in_prod(self) -> None:
        self.assertFalse(_settings(DATABASE_URL="sqlite://", APP_ENV="dev").session_cookie_secure)
        self.assertTrue(_settings(DATABASE_URL="sqlite://", APP_ENV="prod").session_cookie_secure)


if __name__ == "__main__":
    unittest.main()
