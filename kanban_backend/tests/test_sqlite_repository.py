import pytest

from conftest import TickingClock
from kanban_api.db import sqlite_storage
from kanban_api.main import app
from kanban_api.repositories import TaskQuery, get_storage


@pytest.fixture
def sqlite(tmp_path):
    return sqlite_storage(str(tmp_path / "data" / "kanban.db"), TickingClock())


class TestSQLiteCategories:
    def test_create_get_list(self, sqlite):
        backlog = sqlite.categories.create("Backlog")
        done = sqlite.categories.create("Done")
        assert sqlite.categories.get(backlog["id"]) == backlog
        assert [c["type"] for c in sqlite.categories.list()] == ["Backlog", "Done"]
        assert sqlite.categories.get(done["id"] + 100) is None

    def test_save_stamps_updated_at(self, sqlite):
        category = sqlite.categories.create("Todo")
        renamed = sqlite.categories.save({**category, "type": "To Do"})
        assert renamed["type"] == "To Do"
        assert renamed["created_at"] == category["created_at"]
        assert renamed["updated_at"] > category["updated_at"]

    def test_save_missing(self, sqlite):
        ghost = sqlite.categories.create("Ghost")
        sqlite.categories.delete(ghost["id"])
        assert sqlite.categories.save(ghost) is None
        assert sqlite.categories.delete(ghost["id"]) is False


class TestSQLiteTasks:
    def test_create_is_open(self, sqlite):
        category = sqlite.categories.create("Backlog")
        task = sqlite.tasks.create("Fix bug", "desc", 42, category["id"])
        assert task["status"] is False
        assert task["user_id"] == 42
        assert sqlite.tasks.get(task["id"]) == task

    def test_save_never_rewrites_owner(self, sqlite):
        category = sqlite.categories.create("Backlog")
        task = sqlite.tasks.create("Fix bug", "desc", 42, category["id"])
        saved = sqlite.tasks.save({**task, "status": True, "user_id": 99, "created_at": task["updated_at"]})
        assert saved["status"] is True
        assert saved["user_id"] == 42
        assert saved["created_at"] == task["created_at"]

    def test_list_filters(self, sqlite):
        backlog = sqlite.categories.create("Backlog")
        done = sqlite.categories.create("Done")
        a = sqlite.tasks.create("a", "a", 1, backlog["id"])
        b = sqlite.tasks.create("b", "b", 1, done["id"])
        sqlite.tasks.save({**b, "status": True})

        assert [t["id"] for t in sqlite.tasks.list()] == [a["id"], b["id"]]
        assert [t["id"] for t in sqlite.tasks.list(TaskQuery(status=True))] == [b["id"]]
        assert [t["id"] for t in sqlite.tasks.list(TaskQuery(category_id=backlog["id"]))] == [a["id"]]

    def test_deleting_category_cascades(self, sqlite):
        category = sqlite.categories.create("Backlog")
        task = sqlite.tasks.create("a", "a", 1, category["id"])
        assert sqlite.categories.delete(category["id"]) is True
        assert sqlite.tasks.get(task["id"]) is None

    def test_delete_by_category(self, sqlite):
        category = sqlite.categories.create("Backlog")
        sqlite.tasks.create("a", "a", 1, category["id"])
        sqlite.tasks.create("b", "b", 1, category["id"])
        assert sqlite.tasks.delete_by_category(category["id"]) == 2
        assert sqlite.tasks.list() == []


def test_api_over_sqlite(sqlite, client, headers):
    app.dependency_overrides[get_storage] = lambda: sqlite
    category = client.post("/categories/", json={"type": "Backlog"}, headers=headers()).json()["data"]

    res = client.post(
        "/tasks/",
        json={"title": "Fix bug", "description": "desc", "category_id": category["id"]},
        headers=headers(user_id=42),
    )
    assert res.status_code == 201
    task_id = res.json()["data"]["id"]

    res = client.patch(f"/tasks/update-status/{task_id}", json={"status": True}, headers=headers(user_id=42))
    assert res.status_code == 200
    assert sqlite.tasks.get(task_id)["status"] is True


class TestOutOfRangeIds:
    @pytest.fixture(autouse=True)
    def _use_sqlite(self, sqlite, client):
        app.dependency_overrides[get_storage] = lambda: sqlite

    @pytest.mark.parametrize(
        "method,url,body",
        [
            ("DELETE", f"/tasks/{2**70}", None),
            ("PUT", f"/tasks/{2**63}", {"title": "a", "description": "b"}),
            ("PATCH", f"/tasks/update-status/{2**63}", {"status": True}),
            ("PATCH", f"/tasks/update-category/{2**63}", {"category_id": 1}),
        ],
    )
    def test_task_path_id(self, client, headers, method, url, body):
        res = client.request(method, url, json=body, headers=headers())
        assert res.status_code == 400
        assert res.json()["message"].startswith("task_id:")

    @pytest.mark.parametrize("method,body", [("DELETE", None), ("PATCH", {"type": "Done"})])
    def test_category_path_id(self, client, headers, method, body):
        res = client.request(method, f"/categories/{2**70}", json=body, headers=headers())
        assert res.status_code == 400
        assert res.json()["message"].startswith("category_id:")

    def test_body_category_id(self, client, headers, sqlite):
        category = sqlite.categories.create("Backlog")
        task = sqlite.tasks.create("a", "a", 42, category["id"])

        res = client.post("/tasks/", json={"title": "a", "description": "b", "category_id": 2**63}, headers=headers())
        assert res.status_code == 400
        assert res.json()["message"].startswith("category_id:")

        res = client.patch(f"/tasks/update-category/{task['id']}", json={"category_id": 2**63}, headers=headers())
        assert res.status_code == 400
        assert res.json()["message"].startswith("category_id:")
        assert sqlite.tasks.get(task["id"]) == task

    def test_largest_id_reaches_the_database(self, client, headers):
        res = client.delete(f"/tasks/{2**63 - 1}", headers=headers())
        assert res.status_code == 404
        assert res.json() == {"message": "task not found"}
