"""Ownership and no-leak task API tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from app.adapters.auth import InMemoryIdentityProvider
from app.core.config import get_settings
from app.errors import ApiError
from app.main import create_app
from app.repositories import InMemoryTableClient
from app.schemas.task import CreateTaskRequest
from app.services.tasks import TaskService

NOT_FOUND = {"error": "Task not found"}


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = ("TASKBOARD_BACKEND", "TASKBOARD_API_PREFIX")

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["TASKBOARD_BACKEND"] = "memory"
        os.environ.pop("TASKBOARD_API_PREFIX", None)
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class TaskApiTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.app = create_app()
        self.client = TestClient(self.app)
        self.provider: InMemoryIdentityProvider = self.app.state.backend.identity
        self.tables: InMemoryTableClient = self.app.state.backend.tables
        self.owner_headers = self._headers("owner@example.com")
        self.other_headers = self._headers("other@example.com")

    def _headers(self, email: str) -> dict[str, str]:
        user = self.provider.create_user(email, "secret123")
        return {"Authorization": f"Bearer {self.provider.issue_session(user.id).access_token}"}

    def _create(self, headers: dict[str, str], **fields) -> dict:
        response = self.client.post("/api/tasks", headers=headers, json=fields)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["task"]

    def test_create_applies_documented_defaults(self) -> None:
        response = self.client.post("/api/tasks", headers=self.owner_headers, json={"title": "buy groceries"})

        self.assertEqual(response.status_code, 201)
        task = response.json()["task"]
        self.assertEqual(task["title"], "buy groceries")
        self.assertEqual(task["status"], "pending")
        self.assertEqual(task["priority"], "medium")
        self.assertIsNone(task["due_date"])
        self.assertIsNone(task["description"])
        self.assertIn("id", task)
        self.assertIn("created_at", task)

    def test_create_keeps_supplied_fields_and_owner(self) -> None:
        task = self._create(
            self.owner_headers,
            title="File taxes",
            description="before April",
            status="in_progress",
            priority="high",
            due_date="2026-04-15T09:00:00Z",
            category="admin",
        )

        self.assertEqual(task["status"], "in_progress")
        self.assertEqual(task["priority"], "high")
        self.assertEqual(task["category"], "admin")
        self.assertTrue(task["due_date"].startswith("2026-04-15T09:00:00"))
        stored = self.tables.rows("tasks")[0]
        owner_id = next(iter(self.provider.users.values())).id
        self.assertEqual(stored["user_id"], owner_id)

    def test_missing_title_returns_400(self) -> None:
        for body in ({}, {"title": ""}, {"description": "no title"}):
            with self.subTest(body=body):
                response = self.client.post("/api/tasks", headers=self.owner_headers, json=body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "Title is required"})

        self.assertEqual(self.tables.write_count, 0)

    def test_list_is_owner_scoped_and_newest_first(self) -> None:
        first = self._create(self.owner_headers, title="first")
        second = self._create(self.owner_headers, title="second")
        self._create(self.other_headers, title="someone else's")

        response = self.client.get("/api/tasks", headers=self.owner_headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual([task["id"] for task in response.json()["tasks"]], [second["id"], first["id"]])

    def test_status_filter_returns_only_callers_matching_tasks_newest_first(self) -> None:
        older = self._create(self.owner_headers, title="older")
        self._create(self.owner_headers, title="done", status="completed")
        newer = self._create(self.owner_headers, title="newer")
        self._create(self.other_headers, title="other pending")

        response = self.client.get("/api/tasks/status/pending", headers=self.owner_headers)

        self.assertEqual(response.status_code, 200)
        tasks = response.json()["tasks"]
        self.assertEqual([task["id"] for task in tasks], [newer["id"], older["id"]])
        self.assertTrue(all(task["status"] == "pending" for task in tasks))

    def test_priority_and_category_filters(self) -> None:
        urgent = self._create(self.owner_headers, title="urgent", priority="high", category="work")
        self._create(self.owner_headers, title="chill", priority="low", category="home")

        by_priority = self.client.get("/api/tasks/priority/high", headers=self.owner_headers)
        by_category = self.client.get("/api/tasks/category/work", headers=self.owner_headers)
        other_view = self.client.get("/api/tasks/category/work", headers=self.other_headers)

        self.assertEqual([task["id"] for task in by_priority.json()["tasks"]], [urgent["id"]])
        self.assertEqual([task["id"] for task in by_category.json()["tasks"]], [urgent["id"]])
        self.assertEqual(other_view.json(), {"tasks": []})

    def test_get_own_task(self) -> None:
        task = self._create(self.owner_headers, title="mine")

        response = self.client.get(f"/api/tasks/{task['id']}", headers=self.owner_headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["task"]["id"], task["id"])

    def test_cross_owner_and_missing_task_share_no_leak_404(self) -> None:
        task = self._create(self.owner_headers, title="private")

        cross_get = self.client.get(f"/api/tasks/{task['id']}", headers=self.other_headers)
        missing_get = self.client.get("/api/tasks/nonexistent-task-id", headers=self.other_headers)
        cross_put = self.client.put(
            f"/api/tasks/{task['id']}",
            headers=self.other_headers,
            json={"title": "hijacked"},
        )

        for response in (cross_get, missing_get, cross_put):
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.json(), NOT_FOUND)

        stored = self.tables.rows("tasks")[0]
        self.assertEqual(stored["title"], "private")

    def test_cross_owner_delete_leaves_task_in_place(self) -> None:
        task = self._create(self.owner_headers, title="keep me")

        response = self.client.delete(f"/api/tasks/{task['id']}", headers=self.other_headers)

        self.assertEqual(response.status_code, 200)
        owner_view = self.client.get(f"/api/tasks/{task['id']}", headers=self.owner_headers)
        self.assertEqual(owner_view.status_code, 200)

    def test_partial_update_changes_only_supplied_fields(self) -> None:
        task = self._create(
            self.owner_headers,
            title="draft",
            description="keep",
            priority="high",
            due_date="2026-05-01T00:00:00Z",
        )

        response = self.client.put(
            f"/api/tasks/{task['id']}",
            headers=self.owner_headers,
            json={"status": "completed"},
        )

        self.assertEqual(response.status_code, 200)
        updated = response.json()["task"]
        self.assertEqual(updated["status"], "completed")
        self.assertEqual(updated["title"], "draft")
        self.assertEqual(updated["description"], "keep")
        self.assertEqual(updated["priority"], "high")
        self.assertIsNotNone(updated["due_date"])
        self.assertIsNotNone(updated["updated_at"])

    def test_explicit_null_due_date_clears_it(self) -> None:
        task = self._create(self.owner_headers, title="dated", due_date="2026-05-01T00:00:00Z")

        response = self.client.put(
            f"/api/tasks/{task['id']}",
            headers=self.owner_headers,
            json={"due_date": None},
        )

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["task"]["due_date"])

    def test_update_rejects_null_title(self) -> None:
        task = self._create(self.owner_headers, title="named")

        response = self.client.put(f"/api/tasks/{task['id']}", headers=self.owner_headers, json={"title": None})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid task payload"})

    def test_delete_is_idempotent(self) -> None:
        task = self._create(self.owner_headers, title="short lived")

        first = self.client.delete(f"/api/tasks/{task['id']}", headers=self.owner_headers)
        second = self.client.delete(f"/api/tasks/{task['id']}", headers=self.owner_headers)
        never_existed = self.client.delete("/api/tasks/never-existed", headers=self.owner_headers)

        for response in (first, second, never_existed):
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json(), {"message": "Task deleted successfully"})
        self.assertEqual(self.tables.rows("tasks"), [])

    def test_storage_failure_returns_500_with_storage_message(self) -> None:
        self.tables.failure_message = "relation \"tasks\" does not exist"

        response = self.client.get("/api/tasks", headers=self.owner_headers)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "relation \"tasks\" does not exist"})


class TaskServiceUnitTests(unittest.IsolatedAsyncioTestCase):
    async def test_service_scopes_every_query_to_owner(self) -> None:
        tables = InMemoryTableClient()
        service = TaskService(tables)

        task_a = await service.create_task(owner_id="user-a", payload=CreateTaskRequest(title="A"))
        task_b = await service.create_task(owner_id="user-b", payload=CreateTaskRequest(title="B"))

        listed_for_a = await service.list_tasks(owner_id="user-a")
        self.assertEqual([task.id for task in listed_for_a], [task_a.id])

        with self.assertRaises(ApiError) as context:
            await service.get_task(owner_id="user-a", task_id=task_b.id)
        self.assertEqual(context.exception.status_code, 404)

        with self.assertRaises(ApiError):
            await service.update_task(owner_id="user-a", task_id=task_b.id, changes={"title": "mine now"})

        await service.delete_task(owner_id="user-a", task_id=task_b.id)
        self.assertEqual((await service.get_task(owner_id="user-b", task_id=task_b.id)).title, "B")

    async def test_update_cannot_reassign_owner(self) -> None:
        tables = InMemoryTableClient()
        service = TaskService(tables)
        task = await service.create_task(owner_id="user-a", payload=CreateTaskRequest(title="A"))

        updated = await service.update_task(
            owner_id="user-a",
            task_id=task.id,
            changes={"user_id": "user-b", "title": "still mine"},
        )

        self.assertEqual(updated.user_id, "user-a")
        self.assertEqual(updated.title, "still mine")


if __name__ == "__main__":
    unittest.main()
