"""API tests for /api/auth: login, logout, /me and the /session probe."""

import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from tests.support import TEST_PASSWORD, ApiTestCase
from volterra.core.config import get_settings
from volterra.models import UserActivity, UserRole, UserStatus

COOKIE = get_settings().SESSION_COOKIE_NAME


class TestAnonymousRequests(ApiTestCase):
    def test_me_is_401_without_cookie(self) -> None:
        resp = self.client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"detail": "Not authenticated"})

    def test_session_is_200_with_null_user(self) -> None:
        resp = self.client.get("/api/auth/session")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"user": None})

    def test_invalid_cookie_is_treated_as_anonymous(self) -> None:
        headers = {"Cookie": f"{COOKIE}=tampered-value"}
        self.assertEqual(self.client.get("/api/auth/me", headers=headers).status_code, 401)
        resp = self.client.get("/api/auth/session", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["user"])


class TestAuthenticatedRequests(ApiTestCase):
    def test_me_returns_exactly_the_projection(self) -> None:
        user = self.make_user(image="https://cdn.example/ada.png")
        resp = self.client.get("/api/auth/me", headers=self.auth_headers(user))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "id": user.id,
                "name": "Ada Admin",
                "email": "admin@volterra.example",
                "role": "ADMIN",
                "image": "https://cdn.example/ada.png",
            },
        )
        self.assertNotIn("password_hash", resp.text)

    def test_session_returns_user(self) -> None:
        user = self.make_user(role=UserRole.SUPER_ADMIN)
        resp = self.client.get("/api/auth/session", headers=self.auth_headers(user))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["role"], "SUPER_ADMIN")

    def test_deleted_user_cookie_is_anonymous(self) -> None:
        user = self.make_user()
        headers = self.auth_headers(user)
        self.db.delete(user)
        self.db.commit()
        self.assertEqual(self.client.get("/api/auth/me", headers=headers).status_code, 401)


class TestUnexpectedFailures(ApiTestCase):
    def test_me_maps_failure_to_generic_500(self) -> None:
        with patch(
            "volterra.api.v1.auth.resolve_current_user",
            side_effect=OperationalError("SELECT", {}, Exception("connection reset by peer")),
        ):
            resp = self.client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"detail": "Failed to fetch user data"})
        self.assertNotIn("connection reset", resp.text)

    def test_session_maps_failure_to_500(self) -> None:
        with patch(
            "volterra.api.v1.auth.resolve_current_user",
            side_effect=RuntimeError("boom"),
        ):
            resp = self.client.get("/api/auth/session")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"detail": "Failed to retrieve session"})


class TestLogin(ApiTestCase):
    def test_success_sets_http_only_cookie_and_records_activity(self) -> None:
        user = self.make_user()
        resp = self.client.post(
            "/api/auth/login",
            json={"email": user.email, "password": TEST_PASSWORD},
            headers={"User-Agent": "pytest-agent", "X-Forwarded-For": "10.0.0.5, 10.0.0.1"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["email"], user.email)
        set_cookie = resp.headers["set-cookie"]
        self.assertIn(f"{COOKIE}=", set_cookie)
        self.assertIn("HttpOnly", set_cookie)
        self.assertIn("SameSite=strict", set_cookie)

        token = resp.cookies.get(COOKIE)
        me = self.client.get("/api/auth/me", headers={"Cookie": f"{COOKIE}={token}"})
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["id"], user.id)

        activity = self.db.query(UserActivity).one()
        self.assertEqual(activity.action, "login")
        self.assertEqual(activity.ip_address, "10.0.0.5")
        self.assertEqual(activity.user_agent, "pytest-agent")

    def test_wrong_password_and_unknown_email_share_message(self) -> None:
        user = self.make_user()
        wrong = self.client.post(
            "/api/auth/login", json={"email": user.email, "password": "not-the-password"}
        )
        unknown = self.client.post(
            "/api/auth/login", json={"email": "nobody@volterra.example", "password": TEST_PASSWORD}
        )
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertNotIn("set-cookie", wrong.headers)

    def test_blank_credentials_are_400(self) -> None:
        resp = self.client.post("/api/auth/login", json={"email": " ", "password": ""})
        self.assertEqual(resp.status_code, 400)

    def test_pending_user_cannot_log_in(self) -> None:
        user = self.make_user(status=UserStatus.PENDING)
        resp = self.client.post(
            "/api/auth/login", json={"email": user.email, "password": TEST_PASSWORD}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertIn("verify your email", resp.json()["detail"])


class TestLogout(ApiTestCase):
    def test_logout_clears_cookie_and_records_activity(self) -> None:
        user = self.make_user()
        resp = self.client.post("/api/auth/me/logout", headers=self.auth_headers(user))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True, "redirect_url": "/auth/login"})
        self.assertEqual(resp.headers["x-redirect-location"], "/auth/login")
        self.assertIn(f"{COOKIE}=", resp.headers["set-cookie"])
        self.assertIn("Max-Age=0", resp.headers["set-cookie"])
        self.assertEqual(self.db.query(UserActivity).one().action, "logout")

    def test_anonymous_logout_succeeds_without_activity(self) -> None:
        resp = self.client.post("/api/auth/me/logout")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.db.query(UserActivity).count(), 0)


class TestUserActivityLog(ApiTestCase):
    def test_admin_sees_activity_newest_first(self) -> None:
        admin = self.make_user()
        self.client.post("/api/auth/login", json={"email": admin.email, "password": TEST_PASSWORD})
        self.client.post("/api/auth/me/logout", headers=self.auth_headers(admin))
        resp = self.client.get("/api/user-activity", headers=self.auth_headers(admin))
        self.assertEqual(resp.status_code, 200)
        actions = [a["action"] for a in resp.json()["activities"]]
        self.assertEqual(actions, ["logout", "login"])
        self.assertEqual(resp.json()["activities"][0]["user"]["email"], admin.email)

    def test_plain_user_is_forbidden(self) -> None:
        user = self.make_user(email="user@volterra.example", role=UserRole.USER)
        resp = self.client.get("/api/user-activity", headers=self.auth_headers(user))
        self.assertEqual(resp.status_code, 403)

    def test_anonymous_is_unauthorized(self) -> None:
        self.assertEqual(self.client.get("/api/user-activity").status_code, 401)


if __name__ == "__main__":
    unittest.main()
