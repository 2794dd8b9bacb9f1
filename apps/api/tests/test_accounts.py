"""Account lifecycle API tests: signup, signin, signout and refresh."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from app.adapters.auth import InMemoryIdentityProvider
from app.core.config import get_settings
from app.main import create_app


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = ("TASKBOARD_BACKEND", "TASKBOARD_API_PREFIX", "TASKBOARD_REQUIRE_EMAIL_CONFIRMATION")
    require_email_confirmation = "true"
    api_prefix: str | None = None

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["TASKBOARD_BACKEND"] = "memory"
        if self.api_prefix is None:
            os.environ.pop("TASKBOARD_API_PREFIX", None)
        else:
            os.environ["TASKBOARD_API_PREFIX"] = self.api_prefix
        os.environ["TASKBOARD_REQUIRE_EMAIL_CONFIRMATION"] = self.require_email_confirmation
        get_settings.cache_clear()
        self.app = create_app()
        self.client = TestClient(self.app)
        self.provider: InMemoryIdentityProvider = self.app.state.backend.identity

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class SignUpWithConfirmationTests(_SettingsEnvCase):
    def test_signup_requiring_confirmation_returns_null_session(self) -> None:
        response = self.client.post("/api/auth/signup", json={"email": "a@b.com", "password": "secret123"})

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertIsNone(body["session"])
        self.assertTrue(body["requiresEmailConfirmation"])
        self.assertEqual(body["user"]["email"], "a@b.com")
        self.assertIn("confirm your account", body["message"])

    def test_signin_before_confirmation_is_rejected_with_provider_message(self) -> None:
        self.client.post("/api/auth/signup", json={"email": "a@b.com", "password": "secret123"})

        response = self.client.post("/api/auth/signin", json={"email": "a@b.com", "password": "secret123"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Email not confirmed"})

    def test_duplicate_signup_returns_400_with_provider_message(self) -> None:
        self.client.post("/api/auth/signup", json={"email": "a@b.com", "password": "secret123"})

        response = self.client.post("/api/auth/signup", json={"email": "a@b.com", "password": "secret123"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "User already registered"})

    def test_missing_credentials_return_400(self) -> None:
        for path in ("/api/auth/signup", "/api/auth/signin"):
            for body in ({}, {"email": "a@b.com"}, {"password": "secret123"}, {"email": "", "password": "x"}):
                with self.subTest(path=path, body=body):
                    response = self.client.post(path, json=body)
                    self.assertEqual(response.status_code, 400)
                    self.assertEqual(response.json(), {"error": "Email and password are required"})
        self.assertEqual(self.provider.users, {})


class SignUpWithoutConfirmationTests(_SettingsEnvCase):
    require_email_confirmation = "false"

    def test_signup_issues_session_immediately(self) -> None:
        response = self.client.post("/api/auth/signup", json={"email": "c@d.com", "password": "secret123"})

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertFalse(body["requiresEmailConfirmation"])
        self.assertEqual(body["message"], "User created successfully")
        self.assertTrue(body["session"]["access_token"])

        me = self.client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {body['session']['access_token']}"},
        )
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["user"]["email"], "c@d.com")


class SessionLifecycleTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.provider.create_user("user@example.com", "secret123")

    def _sign_in(self) -> dict:
        response = self.client.post(
            "/api/auth/signin",
            json={"email": "user@example.com", "password": "secret123"},
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def test_signin_returns_user_and_session(self) -> None:
        body = self._sign_in()

        self.assertEqual(body["message"], "Signed in successfully")
        self.assertEqual(body["user"]["email"], "user@example.com")
        self.assertEqual(body["session"]["token_type"], "bearer")
        self.assertTrue(body["session"]["refresh_token"])

    def test_signin_with_wrong_password_returns_401(self) -> None:
        response = self.client.post(
            "/api/auth/signin",
            json={"email": "user@example.com", "password": "wrong"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid login credentials"})

    def test_signout_revokes_the_callers_session(self) -> None:
        session = self._sign_in()["session"]
        headers = {"Authorization": f"Bearer {session['access_token']}"}

        response = self.client.post("/api/auth/signout", headers=headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Signed out successfully"})
        after = self.client.get("/api/auth/me", headers=headers)
        self.assertEqual(after.status_code, 401)

    def test_refresh_exchanges_refresh_token_for_new_session(self) -> None:
        session = self._sign_in()["session"]

        response = self.client.post("/api/auth/refresh", json={"refresh_token": session["refresh_token"]})

        self.assertEqual(response.status_code, 200)
        refreshed = response.json()["session"]
        self.assertNotEqual(refreshed["access_token"], session["access_token"])

        replay = self.client.post("/api/auth/refresh", json={"refresh_token": session["refresh_token"]})
        self.assertEqual(replay.status_code, 400)
        self.assertIn("Refresh Token", replay.json()["error"])

    def test_signout_ends_only_the_callers_session(self) -> None:
        laptop = self._sign_in()["session"]
        phone = self._sign_in()["session"]

        response = self.client.post(
            "/api/auth/signout",
            headers={"Authorization": f"Bearer {laptop['access_token']}"},
        )

        self.assertEqual(response.status_code, 200)
        still_signed_in = self.client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {phone['access_token']}"},
        )
        self.assertEqual(still_signed_in.status_code, 200)
        revoked_refresh = self.client.post("/api/auth/refresh", json={"refresh_token": laptop["refresh_token"]})
        self.assertEqual(revoked_refresh.status_code, 400)
        live_refresh = self.client.post("/api/auth/refresh", json={"refresh_token": phone["refresh_token"]})
        self.assertEqual(live_refresh.status_code, 200)

    def test_refresh_requires_token(self) -> None:
        response = self.client.post("/api/auth/refresh", json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Refresh token is required"})


class PrefixedValidationMessageTests(_SettingsEnvCase):
    api_prefix = "/v2"

    def test_required_field_messages_follow_routes_under_custom_prefix(self) -> None:
        user = self.provider.create_user("prefixed@example.com", "secret123")
        headers = {"Authorization": f"Bearer {self.provider.issue_session(user.id).access_token}"}
        cases = (
            ("/v2/auth/signup", {}, "Email and password are required"),
            ("/v2/auth/signin", {"email": "prefixed@example.com"}, "Email and password are required"),
            ("/v2/auth/refresh", {}, "Refresh token is required"),
            ("/v2/auth/forgot-password", {}, "Email is required"),
            ("/v2/auth/reset-password", {"email": "prefixed@example.com"}, "Email, token, and new password are required"),
            ("/v2/tasks", {"description": "untitled"}, "Title is required"),
            ("/v2/categories", {"name": "  "}, "Category name is required"),
        )

        for path, body, message in cases:
            with self.subTest(path=path):
                response = self.client.post(path, headers=headers, json=body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": message})

        unprefixed = self.client.post("/api/auth/signup", json={})
        self.assertEqual(unprefixed.status_code, 404)


if __name__ == "__main__":
    unittest.main()
