"""Tests for the create_user command."""

import unittest
from unittest.mock import patch

from tests.support import DatabaseTestCase
from volterra.core.security import verify_password
from volterra.models import User
from volterra.scripts import create_user


class TestCreateUser(DatabaseTestCase):
    def _run(self, *argv: str) -> int:
        with patch.object(create_user, "SessionLocal", self.SessionLocal):
            return create_user.main(list(argv))

    def test_creates_active_user_with_hashed_password(self) -> None:
        code = self._run(" Owner@Volterra.example ", "a-long-password", "Sandra", "SUPER_ADMIN")
        self.assertEqual(code, 0)
        user = self.db.query(User).filter(User.email == "owner@volterra.example").one()
        self.assertEqual(user.role, "SUPER_ADMIN")
        self.assertEqual(user.status, "ACTIVE")
        self.assertTrue(verify_password("a-long-password", user.password_hash))

    def test_role_defaults_to_user(self) -> None:
        self.assertEqual(self._run("clerk@volterra.example", "a-long-password", "Clerk"), 0)
        self.assertEqual(self.db.query(User).one().role, "USER")

    def test_duplicate_email_fails(self) -> None:
        self.make_user(email="owner@volterra.example")
        self.assertEqual(self._run("owner@volterra.example", "a-long-password", "Again"), 1)
        self.assertEqual(self.db.query(User).count(), 1)

    def test_short_password_fails(self) -> None:
        self.assertEqual(self._run("clerk@volterra.example", "short", "Clerk"), 1)
        self.assertEqual(self.db.query(User).count(), 0)

    def test_unknown_role_is_rejected_by_parser(self) -> None:
        with self.assertRaises(SystemExit):
            self._run("clerk@volterra.example", "a-long-password", "Clerk", "OWNER")


if __name__ == "__main__":
    unittest.main()
