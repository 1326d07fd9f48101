"""HTTP contract tests for admin commands and lifecycle event intake."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from rolesync.core.config import get_settings
from rolesync.main import create_app
from rolesync.repositories.memory import InMemoryIdentityStore, InMemoryProfileStore
from rolesync.schemas.directory import Role

_ADMIN_HEADERS = {"Authorization": "Bearer test:admin-1:admin"}
_EDITOR_HEADERS = {"Authorization": "Bearer test:editor-1:editor"}
_EVENT_HEADERS = {"X-Event-Secret": "test-event-secret"}


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "ROLESYNC_AUTH_PROVIDER",
        "ROLESYNC_STORE_BACKEND",
        "ROLESYNC_EVENT_SECRET",
        "ROLESYNC_FIREBASE_PROJECT_ID",
        "ROLESYNC_FIREBASE_AUDIENCE",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["ROLESYNC_AUTH_PROVIDER"] = "mock"
        os.environ["ROLESYNC_STORE_BACKEND"] = "memory"
        os.environ["ROLESYNC_EVENT_SECRET"] = "test-event-secret"
        os.environ["ROLESYNC_FIREBASE_PROJECT_ID"] = "test-project"
        os.environ["ROLESYNC_FIREBASE_AUDIENCE"] = "test-audience"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class _DirectoryApiCase(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.identity = InMemoryIdentityStore()
        self.profiles = InMemoryProfileStore()
        self.app = create_app(identity_store=self.identity, profile_store=self.profiles)
        self.client = TestClient(self.app)

    def _signup(self, uid: str, **fields: str) -> None:
        self.identity.create_account(uid=uid)
        response = self.client.post(
            "/api/v1/internal/accounts/created",
            headers=_EVENT_HEADERS,
            json={"uid": uid, **fields},
        )
        self.assertEqual(response.status_code, 204)


class LifecycleEventApiTests(_DirectoryApiCase):
    def test_signup_event_creates_viewer_profile(self) -> None:
        self._signup("u1", email="a@x.com", displayName="Sok")

        profile = self.profiles.get("u1")
        assert profile is not None
        self.assertEqual(profile.role, Role.VIEWER)
        self.assertFalse(profile.disabled)
        self.assertEqual(profile.display_name, "Sok")
        self.assertIsNotNone(profile.created_at)
        self.assertEqual(self.identity.accounts["u1"].claims, {"role": "viewer"})

    def test_event_routes_require_event_secret(self) -> None:
        self.identity.create_account(uid="u1")
        before = (self.identity.write_count, self.profiles.write_count)

        for path, body in (
            ("/api/v1/internal/accounts", {}),
            ("/api/v1/internal/accounts/created", {"uid": "u1"}),
            ("/api/v1/internal/accounts/deleted", {"uid": "u1"}),
        ):
            for headers in ({}, {"X-Event-Secret": "wrong"}, _ADMIN_HEADERS):
                with self.subTest(path=path, headers=headers):
                    response = self.client.post(path, headers=headers, json=body)
                    self.assertEqual(response.status_code, 401)
                    self.assertEqual(response.json()["code"], "UNAUTHORIZED")

        self.assertEqual((self.identity.write_count, self.profiles.write_count), before)
        self.assertEqual(set(self.identity.accounts), {"u1"})
        self.assertIsNotNone(self.profiles.get("u1"))

    def test_invalid_event_payload_returns_400(self) -> None:
        response = self.client.post("/api/v1/internal/accounts/deleted", headers=_EVENT_HEADERS, json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "INVALID_ARGUMENT")

    def test_deleted_event_is_idempotent(self) -> None:
        self._signup("u1")

        for _ in range(2):
            response = self.client.post(
                "/api/v1/internal/accounts/deleted",
                headers=_EVENT_HEADERS,
                json={"uid": "u1"},
            )
            self.assertEqual(response.status_code, 204)

        self.assertIsNone(self.profiles.get("u1"))

    def test_handler_failure_returns_500_for_platform_retry(self) -> None:
        self.profiles.fail_next("create")
        with self.assertLogs("rolesync.repositories.memory", level="ERROR"):
            self.identity.create_account(uid="u1")
        self.assertIsNone(self.profiles.get("u1"))

        self.profiles.fail_next("create")
        with self.assertLogs("rolesync.services.directory", level="ERROR"):
            response = self.client.post(
                "/api/v1/internal/accounts/created",
                headers=_EVENT_HEADERS,
                json={"uid": "u1"},
            )

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"code": "INTERNAL", "message": "Unable to process account created event."},
        )

        retry = self.client.post("/api/v1/internal/accounts/created", headers=_EVENT_HEADERS, json={"uid": "u1"})
        self.assertEqual(retry.status_code, 204)
        self.assertIsNotNone(self.profiles.get("u1"))


class AdminCommandApiTests(_DirectoryApiCase):
    def setUp(self) -> None:
        super().setUp()
        self._signup("u1")
        self._signup("u2")

    def test_admin_sets_user_role(self) -> None:
        response = self.client.post(
            "/api/v1/admin/users/role",
            headers=_ADMIN_HEADERS,
            json={"uid": "u1", "newRole": "editor"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Successfully updated role to editor for user u1."})
        self.assertEqual(self.profiles.get("u1").role, Role.EDITOR)
        self.assertEqual(self.identity.accounts["u1"].claims["role"], "editor")

    def test_non_admin_is_denied_and_target_unchanged(self) -> None:
        response = self.client.post(
            "/api/v1/admin/users/role",
            headers=_EDITOR_HEADERS,
            json={"uid": "u1", "newRole": "admin"},
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "PERMISSION_DENIED")
        self.assertEqual(self.profiles.get("u1").role, Role.VIEWER)

    def test_caller_without_role_claim_is_denied(self) -> None:
        response = self.client.get("/api/v1/admin/users", headers={"Authorization": "Bearer test:someone"})

        self.assertEqual(response.status_code, 403)

    def test_non_admin_with_malformed_body_is_still_denied(self) -> None:
        response = self.client.post(
            "/api/v1/admin/users/role",
            headers={**_EDITOR_HEADERS, "Content-Type": "application/json"},
            content=b"{not json",
        )

        self.assertEqual(response.status_code, 403)

    def test_invalid_role_returns_invalid_argument(self) -> None:
        response = self.client.post(
            "/api/v1/admin/users/role",
            headers=_ADMIN_HEADERS,
            json={"uid": "u1", "newRole": "superuser"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "INVALID_ARGUMENT")
        self.assertEqual(self.profiles.get("u1").role, Role.VIEWER)

    def test_missing_bearer_returns_401_before_role_check(self) -> None:
        response = self.client.post("/api/v1/admin/users/role", json={"uid": "u1", "newRole": "editor"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "UNAUTHORIZED")

    def test_toggle_user_status_disables_login(self) -> None:
        response = self.client.post(
            "/api/v1/admin/users/status",
            headers=_ADMIN_HEADERS,
            json={"uid": "u1", "disabled": True},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "User u1 status updated successfully."})
        self.assertFalse(self.identity.accounts["u1"].login_enabled)
        self.assertTrue(self.profiles.get("u1").disabled)

    def test_toggle_user_status_rejects_non_boolean_flag(self) -> None:
        for value in ("yes", "true", 1, "0"):
            with self.subTest(value=value):
                response = self.client.post(
                    "/api/v1/admin/users/status",
                    headers=_ADMIN_HEADERS,
                    json={"uid": "u1", "disabled": value},
                )
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["code"], "INVALID_ARGUMENT")

        self.assertTrue(self.identity.accounts["u1"].login_enabled)
        self.assertFalse(self.profiles.get("u1").disabled)

    def test_delete_user_removes_profile_through_deleted_event(self) -> None:
        response = self.client.post("/api/v1/admin/users/delete", headers=_ADMIN_HEADERS, json={"uid": "u2"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Successfully deleted user u2."})
        self.assertEqual(self.identity.emitted_events[-1].kind, "deleted")
        self.assertIsNone(self.profiles.get("u2"))

        listing = self.client.get("/api/v1/admin/users", headers=_ADMIN_HEADERS)
        self.assertEqual([user["uid"] for user in listing.json()["users"]], ["u1"])

        replay = self.client.post("/api/v1/internal/accounts/deleted", headers=_EVENT_HEADERS, json={"uid": "u2"})
        self.assertEqual(replay.status_code, 204)

    def test_store_failure_returns_generic_internal_error(self) -> None:
        self.profiles.fail_next("update", "firestore said: quota for project xyz exceeded")

        with self.assertLogs("rolesync.services.admin_gateway", level="ERROR"):
            response = self.client.post(
                "/api/v1/admin/users/status",
                headers=_ADMIN_HEADERS,
                json={"uid": "u1", "disabled": True},
            )

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"code": "INTERNAL", "message": "Unable to update user status."})

    def test_get_all_users_returns_newest_first(self) -> None:
        response = self.client.get("/api/v1/admin/users", headers=_ADMIN_HEADERS)

        self.assertEqual(response.status_code, 200)
        users = response.json()["users"]
        self.assertEqual([user["uid"] for user in users], ["u2", "u1"])
        self.assertEqual(
            set(users[0].keys()),
            {"uid", "displayName", "email", "photoURL", "createdAt", "role", "disabled"},
        )
        self.assertTrue(users[0]["createdAt"].endswith("Z"))


class DefaultStoreWiringTests(_SettingsEnvCase):
    def test_memory_backend_is_created_lazily_and_reused(self) -> None:
        app = create_app()
        client = TestClient(app)

        first = client.get("/api/v1/admin/users", headers=_ADMIN_HEADERS)
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), {"users": []})
        self.assertIsInstance(app.state.identity_store, InMemoryIdentityStore)
        profile_store = app.state.profile_store
        self.assertIsInstance(profile_store, InMemoryProfileStore)

        client.get("/api/v1/admin/users", headers=_ADMIN_HEADERS)
        self.assertIs(app.state.profile_store, profile_store)
        self.assertEqual(len(app.state.identity_store.listeners), 1)

    def test_memory_backend_runs_account_lifecycle_over_http(self) -> None:
        client = TestClient(create_app())

        registered = client.post(
            "/api/v1/internal/accounts",
            headers=_EVENT_HEADERS,
            json={"displayName": "Sok", "email": "sok@x.com"},
        )
        self.assertEqual(registered.status_code, 201)
        uid = registered.json()["uid"]

        users = client.get("/api/v1/admin/users", headers=_ADMIN_HEADERS).json()["users"]
        self.assertEqual([(user["uid"], user["role"], user["displayName"]) for user in users], [(uid, "viewer", "Sok")])

        promoted = client.post(
            "/api/v1/admin/users/role",
            headers=_ADMIN_HEADERS,
            json={"uid": uid, "newRole": "editor"},
        )
        self.assertEqual(promoted.status_code, 200)

        deleted = client.post("/api/v1/admin/users/delete", headers=_ADMIN_HEADERS, json={"uid": uid})
        self.assertEqual(deleted.status_code, 200)

        users = client.get("/api/v1/admin/users", headers=_ADMIN_HEADERS).json()["users"]
        self.assertEqual(users, [])

    def test_registration_rejects_malformed_payload(self) -> None:
        client = TestClient(create_app())

        response = client.post("/api/v1/internal/accounts", headers=_EVENT_HEADERS, json={"email": ["a@x.com"]})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "INVALID_ARGUMENT")

    def test_openapi_documents_contract_response_codes(self) -> None:
        client = TestClient(create_app())

        paths = client.get("/openapi.json").json()["paths"]

        self.assertEqual(
            set(paths["/api/v1/admin/users/role"]["post"]["responses"].keys()),
            {"200", "400", "401", "403", "500"},
        )
        self.assertEqual(set(paths["/api/v1/admin/users"]["get"]["responses"].keys()), {"200", "401", "403", "500"})
        self.assertEqual(
            set(paths["/api/v1/internal/accounts/deleted"]["post"]["responses"].keys()),
            {"204", "400", "401", "500"},
        )
        self.assertEqual(
            set(paths["/api/v1/internal/accounts"]["post"]["responses"].keys()),
            {"201", "400", "401", "500"},
        )


if __name__ == "__main__":
    unittest.main()
