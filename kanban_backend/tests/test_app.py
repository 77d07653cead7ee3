import json

from fastapi.testclient import TestClient

from kanban_api.errors import InternalError
from kanban_api.generate_openapi import generate_openapi
from kanban_api.main import app
from kanban_api.usecases import TaskUsecase, get_category_usecase, get_task_usecase


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] in ("memory", "sqlite")


class TestErrorEnvelope:
    def test_unknown_route(self, client):
        res = client.get("/nope")
        assert res.status_code == 404
        assert res.json() == {"message": "Not Found"}

    def test_wrong_method(self, client, headers):
        res = client.post("/tasks/update-status/1", json={"status": True}, headers=headers())
        assert res.status_code == 405
        assert set(res.json()) == {"message"}

    def test_use_case_failure_is_mapped(self, client, headers):
        class BrokenTasks(TaskUsecase):
            def get_tasks(self, query=None):
                raise InternalError("database unavailable")

            def get_task_by_id(self, task_id):
                raise NotImplementedError

            def store_task(self, title, description, user_id, category_id):
                raise NotImplementedError

            def update_task(self, task):
                raise NotImplementedError

            def delete_task(self, task_id):
                raise NotImplementedError

        app.dependency_overrides[get_task_usecase] = lambda: BrokenTasks()
        res = client.get("/tasks/", headers=headers())
        assert res.status_code == 500
        assert res.json() == {"message": "database unavailable"}

    def test_unclassified_failure(self, storage, headers):
        class Exploding:
            def get_categories(self):
                raise RuntimeError("boom")

        app.dependency_overrides[get_category_usecase] = lambda: Exploding()
        client = TestClient(app, raise_server_exceptions=False)
        res = client.get("/categories/", headers=headers())
        assert res.status_code == 500
        assert res.json() == {"message": "internal server error"}


def test_generate_openapi(tmp_path):
    out = generate_openapi(str(tmp_path / "interfaces" / "openapi.json"))
    with open(out, encoding="utf-8") as f:
        schema = json.load(f)

    assert {"/categories/", "/tasks/", "/tasks/update-status/{task_id}", "/tasks/update-category/{task_id}"} <= set(
        schema["paths"]
    )
    assert {t["name"] for t in schema["tags"]} >= {"health", "categories", "tasks"}
    assert "HTTPBearer" in schema["components"]["securitySchemes"]
