"""HTTP contract tests for the user endpoints."""

from __future__ import annotations

import os
import unittest
from typing import Any

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.main import create_app
from app.routes.dependencies import get_authenticated_principal, get_user_service
from app.schemas.user import User, UserRole
from app.services.users import InMemoryUserService


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "ACQ_AUTH_PROVIDER",
        "ACQ_ENVIRONMENT",
        "ACQ_LOG_TO_FILE",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["ACQ_AUTH_PROVIDER"] = "mock"
        os.environ["ACQ_ENVIRONMENT"] = "test"
        os.environ["ACQ_LOG_TO_FILE"] = "false"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class _RecordingUserService(InMemoryUserService):
    """Delegates to the in-memory service while recording every call."""

    def __init__(self, store: Any, failure: Exception | None = None) -> None:
        super().__init__(store)
        self.failure = failure
        self.calls: list[str] = []

    async def list_users(self) -> list[User]:
        self.calls.append("list_users")
        if self.failure is not None:
            raise self.failure
        return await super().list_users()

    async def get_user_by_id(self, user_id: int) -> User:
        self.calls.append("get_user_by_id")
        if self.failure is not None:
            raise self.failure
        return await super().get_user_by_id(user_id)

    async def update_user(self, user_id: int, changes: dict[str, Any]) -> User:
        self.calls.append("update_user")
        return await super().update_user(user_id, changes)

    async def delete_user(self, user_id: int) -> None:
        self.calls.append("delete_user")
        await super().delete_user(user_id)


def _bearer(user_id: str, role: str = "user") -> dict[str, str]:
    return {"Authorization": f"Bearer test:{user_id}:{role}"}


class UsersApiTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.app = create_app()
        self.store = self.app.state.store
        self.store.seed_users(
            [
                {"name": "Ada", "email": "ada@example.com", "role": UserRole.ADMIN},
                {"name": "Bob", "email": "bob@example.com"},
                {"name": "Cy", "email": "cy@example.com"},
            ]
        )
        self.client = TestClient(self.app)

    def _record_service_calls(self, failure: Exception | None = None) -> _RecordingUserService:
        service = _RecordingUserService(self.store, failure=failure)
        self.app.dependency_overrides[get_user_service] = lambda: service
        return service

    def test_list_users_returns_count_matching_users(self) -> None:
        response = self.client.get("/api/users", headers=_bearer("2"))

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Successfully retrieved users")
        self.assertEqual([user["id"] for user in body["users"]], [1, 2, 3])
        self.assertEqual(body["count"], len(body["users"]))
        self.assertNotIn("password", body["users"][0])

    def test_missing_or_invalid_bearer_is_rejected_by_auth_gate(self) -> None:
        service = self._record_service_calls()
        cases = [
            ("GET", "/api/users", {}),
            ("GET", "/api/users/abc", {}),
            ("PUT", "/api/users/2", {"Authorization": "Bearer not-a-valid-token"}),
            ("DELETE", "/api/users/2", {"Authorization": "Bearer test:2:superuser"}),
        ]
        for method, path, headers in cases:
            with self.subTest(method=method, path=path):
                response = self.client.request(method, path, headers=headers, json={"name": "X"})
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()["error"], "Unauthorized")
                self.assertIn("message", response.json())
        self.assertEqual(service.calls, [])
        self.assertEqual(self.store.user_write_count, 3)

    def test_malformed_ids_return_400_on_every_id_endpoint_without_service_call(self) -> None:
        service = self._record_service_calls()
        admin = _bearer("1", "admin")
        for method in ("GET", "PUT", "DELETE"):
            for raw_id in ("abc", "0", "-4"):
                with self.subTest(method=method, raw_id=raw_id):
                    response = self.client.request(method, f"/api/users/{raw_id}", headers=admin, json={"name": "X"})
                    self.assertEqual(response.status_code, 400)
                    body = response.json()
                    self.assertEqual(body["error"], "Validation Failed")
                    self.assertEqual(body["details"][0]["field"], "id")
        self.assertEqual(service.calls, [])

    def test_get_user_by_id_and_missing_user(self) -> None:
        found = self.client.get("/api/users/2", headers=_bearer("3"))
        self.assertEqual(found.status_code, 200)
        self.assertEqual(found.json()["message"], "Successfully retrieved user")
        self.assertEqual(found.json()["user"]["email"], "bob@example.com")

        missing = self.client.get("/api/users/999", headers=_bearer("3"))
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json(), {"error": "User not found"})

    def test_non_admin_updating_another_user_is_forbidden(self) -> None:
        service = self._record_service_calls()
        response = self.client.put("/api/users/3", headers=_bearer("2"), json={"name": "X"})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.json(),
            {"error": "Forbidden", "message": "You can only update your own information"},
        )
        self.assertEqual(service.calls, [])
        self.assertEqual(self.store.get_user(3).name, "Cy")

    def test_non_admin_cannot_change_own_role(self) -> None:
        response = self.client.put("/api/users/2", headers=_bearer("2"), json={"role": "admin"})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Only admins can change user roles")
        self.assertIs(self.store.get_user(2).role, UserRole.USER)

    def test_self_update_persists_changes(self) -> None:
        response = self.client.put(
            "/api/users/2",
            headers=_bearer("2"),
            json={"name": "Robert", "email": "robert@example.com"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "User updated successfully")
        self.assertEqual(body["user"]["name"], "Robert")
        self.assertIsNotNone(body["user"]["updated_at"])
        self.assertEqual(self.store.get_user(2).email, "robert@example.com")

    def test_admin_can_promote_another_user(self) -> None:
        service = self._record_service_calls()
        response = self.client.put("/api/users/3", headers=_bearer("1", "admin"), json={"role": "admin"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(service.calls, ["update_user"])
        self.assertEqual(response.json()["user"]["role"], "admin")
        self.assertIs(self.store.get_user(3).role, UserRole.ADMIN)

    def test_invalid_body_is_400_even_when_caller_is_not_owner(self) -> None:
        cases: list[dict[str, Any]] = [
            {"content": b"{not json", "headers": {"Content-Type": "application/json"}},
            {"json": {}},
            {"json": {"password": "hunter2"}},
        ]
        for case in cases:
            with self.subTest(case=case):
                headers = {**_bearer("2"), **case.pop("headers", {})}
                response = self.client.put("/api/users/3", headers=headers, **case)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["error"], "Validation Failed")

    def test_update_missing_user_returns_404(self) -> None:
        response = self.client.put("/api/users/999", headers=_bearer("1", "admin"), json={"name": "Ghost"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "User not found"})

    def test_controller_rejects_request_without_principal(self) -> None:
        self.app.dependency_overrides[get_authenticated_principal] = lambda: None

        update = self.client.put("/api/users/2", json={"name": "X"})
        self.assertEqual(update.status_code, 401)
        self.assertEqual(update.json(), {"error": "Unauthorized", "message": "Authentication required"})

        delete = self.client.delete("/api/users/2")
        self.assertEqual(delete.status_code, 401)
        self.assertIsNotNone(self.store.get_user(2))

    def test_delete_self_and_admin_delete(self) -> None:
        own = self.client.delete("/api/users/2", headers=_bearer("2"))
        self.assertEqual(own.status_code, 200)
        self.assertEqual(own.json(), {"message": "User deleted successfully"})
        self.assertIsNone(self.store.get_user(2))

        other = self.client.delete("/api/users/1", headers=_bearer("3"))
        self.assertEqual(other.status_code, 403)
        self.assertEqual(other.json()["message"], "You can only delete your own account")

        by_admin = self.client.delete("/api/users/3", headers=_bearer("1", "admin"))
        self.assertEqual(by_admin.status_code, 200)
        self.assertEqual(self.store.user_delete_count, 2)

        again = self.client.delete("/api/users/3", headers=_bearer("1", "admin"))
        self.assertEqual(again.status_code, 404)
        self.assertEqual(again.json(), {"error": "User not found"})

    def test_unexpected_service_failure_reaches_generic_handler(self) -> None:
        self._record_service_calls(failure=RuntimeError("User store offline"))
        client = TestClient(self.app, raise_server_exceptions=False)

        response = client.get("/api/users/2", headers=_bearer("2"))

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Internal Server Error", "message": "User store offline"})

    def test_not_found_message_without_not_found_kind_is_not_converted(self) -> None:
        self._record_service_calls(failure=RuntimeError("User not found"))
        client = TestClient(self.app, raise_server_exceptions=False)

        response = client.get("/api/users/2", headers=_bearer("2"))

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Internal Server Error")


class HealthApiTests(_SettingsEnvCase):
    def test_health_reports_ok_without_authentication(self) -> None:
        client = TestClient(create_app())

        response = client.get("/health")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "OK")
        self.assertIn("timestamp", body)
        self.assertGreaterEqual(body["uptime"], 0)

    def test_api_root_reports_running(self) -> None:
        client = TestClient(create_app())
        response = client.get("/api")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Acquisitions API is running!"})

    def test_openapi_lists_user_paths(self) -> None:
        client = TestClient(create_app())
        paths = client.get("/openapi.json").json()["paths"]

        self.assertIn("/api/users", paths)
        self.assertEqual(set(paths["/api/users/{id}"].keys()), {"get", "put", "delete"})
        self.assertIn("403", paths["/api/users/{id}"]["put"]["responses"])
