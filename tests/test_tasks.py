from datetime import datetime

import pytest
from sqlalchemy import delete
from kanban_api.models.user import User


def _ts(value):
    return datetime.fromisoformat(value) if value else None


def _create(client, headers, **body):
    body.setdefault("title", "A")
    body.setdefault("priority", "high")
    r = client.post("/api/tasks", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["task"]


class TestCreate:
    def test_create_forces_todo_and_caller_as_creator(self, client, admin_headers, user_ids):
        r = client.post(
            "/api/tasks",
            json={"title": "  A  ", "priority": "high", "status": "done", "completed_at": "2020-01-01T00:00:00"},
            headers=admin_headers,
        )
        assert r.status_code == 201
        body = r.json()
        assert body["message"] == "Task created successfully"
        task = body["task"]
        assert task["title"] == "A"
        assert task["status"] == "todo"
        assert task["completed_at"] is None
        assert task["created_by_id"] == user_ids["admin"]
        assert task["created_by_name"] == "System Administrator"
        assert task["created_at"] == task["updated_at"]

    def test_create_with_all_fields(self, client, john_headers, user_ids):
        task = _create(
            client, john_headers,
            title="Quarterly report",
            description="numbers",
            priority="low",
            assignee_id=user_ids["jane"],
            due_date="2026-12-31",
        )
        assert task["description"] == "numbers"
        assert task["priority"] == "low"
        assert task["assignee_id"] == user_ids["jane"]
        assert task["assignee_name"] == "Jane Doe"
        assert task["due_date"] == "2026-12-31"
        assert task["created_by_name"] == "John Smith"

    @pytest.mark.parametrize("body", [
        {"priority": "high"},
        {"title": "", "priority": "high"},
        {"title": "   ", "priority": "high"},
        {"title": "A"},
        {"title": "A", "priority": "urgent"},
        {"title": "A", "priority": "high", "due_date": "not-a-date"},
    ])
    def test_create_rejects_invalid_input(self, client, admin_headers, body):
        r = client.post("/api/tasks", json=body, headers=admin_headers)
        assert r.status_code == 400
        assert "error" in r.json()
        assert client.get("/api/tasks", headers=admin_headers).json() == []

    def test_create_with_unknown_assignee_is_400(self, client, admin_headers):
        r = client.post("/api/tasks", json={"title": "A", "priority": "low", "assignee_id": 9999}, headers=admin_headers)
        assert r.status_code == 400
        assert r.json() == {"error": "Assignee does not exist"}

    @pytest.mark.parametrize("assignee_id", [2**70, 2**31, 0])
    def test_create_with_out_of_range_assignee_is_400(self, client, admin_headers, assignee_id):
        r = client.post("/api/tasks", json={"title": "A", "priority": "low", "assignee_id": assignee_id}, headers=admin_headers)
        assert r.status_code == 400
        assert r.json()["error"].startswith("assignee_id")
        assert client.get("/api/tasks", headers=admin_headers).json() == []


class TestRead:
    def test_list_is_newest_first_and_enriched(self, client, admin_headers, john_headers, user_ids):
        first = _create(client, admin_headers, title="first")
        second = _create(client, john_headers, title="second", assignee_id=user_ids["mike"])

        r = client.get("/api/tasks", headers=admin_headers)
        assert r.status_code == 200
        tasks = r.json()
        assert [t["id"] for t in tasks] == [second["id"], first["id"]]
        assert tasks[0]["assignee_name"] == "Mike Johnson"
        assert tasks[0]["created_by_name"] == "John Smith"
        assert tasks[1]["assignee_name"] is None

    def test_fetch_single_task(self, client, admin_headers):
        task = _create(client, admin_headers)
        r = client.get(f"/api/tasks/{task['id']}", headers=admin_headers)
        assert r.status_code == 200
        assert r.json() == task

    def test_fetch_missing_task_is_404(self, client, admin_headers):
        r = client.get("/api/tasks/9999", headers=admin_headers)
        assert r.status_code == 404
        assert r.json() == {"error": "Task not found"}

    def test_non_integer_id_is_400(self, client, admin_headers):
        r = client.get("/api/tasks/abc", headers=admin_headers)
        assert r.status_code == 400

    @pytest.mark.parametrize("task_id", [2**70, 2**31, 0, -1])
    def test_ids_outside_the_column_range_are_404(self, client, admin_headers, task_id):
        url = f"/api/tasks/{task_id}"
        for r in (
            client.get(url, headers=admin_headers),
            client.put(url, json={"title": "B"}, headers=admin_headers),
            client.delete(url, headers=admin_headers),
        ):
            assert r.status_code == 404
            assert r.json() == {"error": "Task not found"}


class TestUpdate:
    def test_status_lifecycle_drives_completed_at(self, client, admin_headers):
        task = _create(client, admin_headers, title="A", priority="high")
        url = f"/api/tasks/{task['id']}"

        fetched = client.get(url, headers=admin_headers).json()
        assert fetched["status"] == "todo"
        assert fetched["completed_at"] is None
        assert fetched["created_by_name"] == "System Administrator"

        r = client.put(url, json={"status": "done"}, headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["message"] == "Task updated successfully"
        fetched = client.get(url, headers=admin_headers).json()
        assert fetched["status"] == "done"
        assert fetched["completed_at"] is not None

        client.put(url, json={"status": "todo"}, headers=admin_headers)
        fetched = client.get(url, headers=admin_headers).json()
        assert fetched["status"] == "todo"
        assert fetched["completed_at"] is None

    @pytest.mark.parametrize("status", ["todo", "inprogress", "review"])
    def test_leaving_done_clears_completed_at(self, client, admin_headers, status):
        task = _create(client, admin_headers)
        url = f"/api/tasks/{task['id']}"
        client.put(url, json={"status": "done"}, headers=admin_headers)

        updated = client.put(url, json={"status": status}, headers=admin_headers).json()["task"]
        assert updated["status"] == status
        assert updated["completed_at"] is None

    def test_done_again_restamps_completed_at(self, client, admin_headers):
        task = _create(client, admin_headers)
        url = f"/api/tasks/{task['id']}"
        first = client.put(url, json={"status": "done"}, headers=admin_headers).json()["task"]
        second = client.put(url, json={"status": "done"}, headers=admin_headers).json()["task"]
        assert _ts(second["completed_at"]) > _ts(first["completed_at"])

    def test_completed_at_is_not_directly_settable(self, client, admin_headers):
        task = _create(client, admin_headers)
        r = client.put(
            f"/api/tasks/{task['id']}",
            json={"completed_at": "2020-01-01T00:00:00", "title": "B"},
            headers=admin_headers,
        )
        assert r.status_code == 200
        assert r.json()["task"]["completed_at"] is None
        assert r.json()["task"]["title"] == "B"

    def test_omitted_fields_are_unchanged(self, client, admin_headers, user_ids):
        task = _create(
            client, admin_headers,
            title="Keep me",
            description="original",
            priority="medium",
            assignee_id=user_ids["john"],
            due_date="2026-11-01",
        )
        r = client.put(f"/api/tasks/{task['id']}", json={"priority": "low"}, headers=admin_headers)
        updated = r.json()["task"]

        assert updated["priority"] == "low"
        for field in ("title", "description", "assignee_id", "due_date", "status", "completed_at", "created_by_id", "created_at"):
            assert updated[field] == task[field], field
        assert _ts(updated["updated_at"]) > _ts(task["updated_at"])

    def test_explicit_null_clears_optional_fields(self, client, admin_headers, user_ids):
        task = _create(client, admin_headers, description="d", assignee_id=user_ids["john"], due_date="2026-11-01")
        r = client.put(
            f"/api/tasks/{task['id']}",
            json={"description": None, "assignee_id": None, "due_date": None},
            headers=admin_headers,
        )
        assert r.status_code == 200
        updated = r.json()["task"]
        assert updated["description"] is None
        assert updated["assignee_id"] is None
        assert updated["assignee_name"] is None
        assert updated["due_date"] is None

    @pytest.mark.parametrize("field", ["title", "priority", "status"])
    def test_explicit_null_on_required_field_is_400(self, client, admin_headers, field):
        task = _create(client, admin_headers)
        r = client.put(f"/api/tasks/{task['id']}", json={field: None}, headers=admin_headers)
        assert r.status_code == 400
        assert r.json() == {"error": f"{field} cannot be null"}

    def test_empty_body_only_refreshes_updated_at(self, client, admin_headers):
        task = _create(client, admin_headers)
        r = client.put(f"/api/tasks/{task['id']}", json={}, headers=admin_headers)
        assert r.status_code == 200
        updated = r.json()["task"]
        assert {k: v for k, v in updated.items() if k != "updated_at"} == {
            k: v for k, v in task.items() if k != "updated_at"
        }
        assert _ts(updated["updated_at"]) > _ts(task["updated_at"])

    @pytest.mark.parametrize("body", [
        {"priority": "urgent"},
        {"status": "archived"},
        {"title": ""},
        {"assignee_id": 9999},
    ])
    def test_invalid_update_is_400_and_task_unchanged(self, client, admin_headers, body):
        task = _create(client, admin_headers)
        url = f"/api/tasks/{task['id']}"
        r = client.put(url, json=body, headers=admin_headers)
        assert r.status_code == 400
        assert client.get(url, headers=admin_headers).json() == task

    def test_reassign_to_another_user(self, client, admin_headers, user_ids):
        task = _create(client, admin_headers, assignee_id=user_ids["john"])
        url = f"/api/tasks/{task['id']}"
        r = client.put(url, json={"assignee_id": user_ids["jane"]}, headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["task"]["assignee_id"] == user_ids["jane"]
        assert r.json()["task"]["assignee_name"] == "Jane Doe"

        fetched = client.get(url, headers=admin_headers).json()
        assert fetched["assignee_name"] == "Jane Doe"
        assert fetched["title"] == task["title"]

    def test_update_with_out_of_range_assignee_is_400(self, client, admin_headers):
        task = _create(client, admin_headers)
        url = f"/api/tasks/{task['id']}"
        r = client.put(url, json={"assignee_id": 2**70}, headers=admin_headers)
        assert r.status_code == 400
        assert client.get(url, headers=admin_headers).json() == task

    def test_update_missing_task_is_404(self, client, admin_headers):
        r = client.put("/api/tasks/9999", json={"title": "B"}, headers=admin_headers)
        assert r.status_code == 404
        assert r.json() == {"error": "Task not found"}

    def test_any_authenticated_user_may_update(self, client, admin_headers, john_headers, user_ids):
        task = _create(client, admin_headers)
        r = client.put(f"/api/tasks/{task['id']}", json={"status": "review"}, headers=john_headers)
        assert r.status_code == 200
        assert r.json()["task"]["created_by_id"] == user_ids["admin"]


class TestDelete:
    def test_delete_then_fetch_is_404(self, client, admin_headers):
        task = _create(client, admin_headers)
        url = f"/api/tasks/{task['id']}"
        r = client.delete(url, headers=admin_headers)
        assert r.status_code == 200
        assert r.json() == {"message": "Task deleted successfully"}

        assert client.get(url, headers=admin_headers).status_code == 404
        assert client.delete(url, headers=admin_headers).status_code == 404

    def test_delete_missing_task_is_404(self, client, admin_headers):
        r = client.delete("/api/tasks/9999", headers=admin_headers)
        assert r.status_code == 404
        assert r.json() == {"error": "Task not found"}


class TestUserRemoval:
    def test_removing_assignee_nulls_the_reference(self, client, admin_headers, db, user_ids):
        task = _create(client, admin_headers, assignee_id=user_ids["mike"])
        db.execute(delete(User).where(User.id == user_ids["mike"]))
        db.commit()

        fetched = client.get(f"/api/tasks/{task['id']}", headers=admin_headers).json()
        assert fetched["assignee_id"] is None
        assert fetched["assignee_name"] is None

    def test_removing_creator_removes_their_tasks(self, client, admin_headers, john_headers, db, user_ids):
        task = _create(client, john_headers)
        db.execute(delete(User).where(User.id == user_ids["john"]))
        db.commit()

        assert client.get(f"/api/tasks/{task['id']}", headers=admin_headers).status_code == 404
