from datetime import datetime
from uuid import UUID, uuid4

from src.api.exceptions import StorageError


def create_task_payload(
    title="Test Task",
    description="Do something",
    status="TODO",
    due_date=None,
):
    payload = {
        "title": title,
        "description": description,
        "status": status,
    }
    if due_date is not None:
        payload["dueDate"] = due_date
    return payload


def assert_task_shape(task: dict):
    # Basic structure validation
    for key in ["id", "title", "status", "createdAt", "updatedAt"]:
        assert key in task
    # Optional fields
    assert "description" in task
    assert "dueDate" in task
    UUID(task["id"])
    assert isinstance(task["title"], str)
    assert isinstance(task["status"], str)
    # Timestamps are ISO8601 strings parseable by datetime.fromisoformat
    datetime.fromisoformat(task["createdAt"])
    datetime.fromisoformat(task["updatedAt"])
    if task["dueDate"] is not None:
        datetime.fromisoformat(task["dueDate"])


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] in ("memory", "sqlite")


class TestTasksCRUD:
    def test_create_task_minimal(self, client):
        res = client.post("/api/tasks", json={"title": "Buy milk", "status": "TODO"})
        assert res.status_code == 201
        task = res.json()
        assert_task_shape(task)
        assert task["title"] == "Buy milk"
        assert task["description"] is None
        assert task["dueDate"] is None
        assert task["createdAt"] == task["updatedAt"]

    def test_create_task_with_due_date_string(self, client):
        payload = create_task_payload(title="Pay bills", description="Electricity", due_date="2099-12-25")
        res = client.post("/api/tasks", json=payload)
        assert res.status_code == 201
        task = res.json()
        assert_task_shape(task)
        # Due date should be promoted to midnight
        assert task["dueDate"].startswith("2099-12-25T00:00")

    def test_create_ignores_client_supplied_id(self, client):
        supplied = str(uuid4())
        payload = create_task_payload(title="Mine")
        payload["id"] = supplied
        res = client.post("/api/tasks", json=payload)
        assert res.status_code == 201
        assert res.json()["id"] != supplied

    def test_get_task_and_not_found(self, client):
        res_create = client.post("/api/tasks", json=create_task_payload(title="Read book"))
        assert res_create.status_code == 201
        tid = res_create.json()["id"]

        res_get = client.get(f"/api/tasks/{tid}")
        assert res_get.status_code == 200
        fetched = res_get.json()
        assert fetched["id"] == tid
        assert fetched["title"] == "Read book"

        missing = uuid4()
        res_404 = client.get(f"/api/tasks/{missing}")
        assert res_404.status_code == 404
        body = res_404.json()
        assert body["error"] == "TaskNotFound"
        assert str(missing) in body["message"]

    def test_list_tasks(self, client):
        ids = {
            client.post("/api/tasks", json=create_task_payload(title=f"Task {i}")).json()["id"]
            for i in range(3)
        }
        res = client.get("/api/tasks")
        assert res.status_code == 200
        items = res.json()
        assert isinstance(items, list)
        assert {t["id"] for t in items} == ids

    def test_list_tasks_empty_is_not_found(self, client):
        # An empty store is reported as 404, not as an empty array
        res = client.get("/api/tasks")
        assert res.status_code == 404
        assert res.json()["message"] == "No tasks found"

    def test_patch_status(self, client):
        created = client.post("/api/tasks", json=create_task_payload(title="Partial", description="X")).json()
        tid = created["id"]

        res_patch = client.patch(f"/api/tasks/{tid}/status", params={"status": "IN_PROGRESS"})
        assert res_patch.status_code == 200
        patched = res_patch.json()
        assert patched["id"] == tid
        assert patched["status"] == "IN_PROGRESS"
        # Other fields should remain unchanged
        assert patched["title"] == "Partial"
        assert patched["description"] == "X"
        assert patched["createdAt"] == created["createdAt"]
        assert datetime.fromisoformat(patched["updatedAt"]) > datetime.fromisoformat(created["updatedAt"])

        res_patch_nf = client.patch(f"/api/tasks/{uuid4()}/status", params={"status": "DONE"})
        assert res_patch_nf.status_code == 404
        assert res_patch_nf.json()["error"] == "TaskNotFound"

    def test_delete_task(self, client):
        tid = client.post("/api/tasks", json=create_task_payload(title="ToDelete")).json()["id"]

        res_del = client.delete(f"/api/tasks/{tid}")
        assert res_del.status_code == 204
        assert res_del.text == ""

        # Subsequent get is 404
        res_get = client.get(f"/api/tasks/{tid}")
        assert res_get.status_code == 404
        # Deleting again should still be 404
        res_del_again = client.delete(f"/api/tasks/{tid}")
        assert res_del_again.status_code == 404
        assert tid in res_del_again.json()["message"]

    def test_task_lifecycle(self, client):
        res = client.post("/api/tasks", json={"title": "Buy groceries", "status": "TODO"})
        assert res.status_code == 201
        tid = res.json()["id"]

        res = client.get(f"/api/tasks/{tid}")
        assert res.status_code == 200
        assert res.json()["title"] == "Buy groceries"

        res = client.patch(f"/api/tasks/{tid}/status?status=DONE")
        assert res.status_code == 200
        assert res.json()["status"] == "DONE"

        assert client.delete(f"/api/tasks/{tid}").status_code == 204
        assert client.get(f"/api/tasks/{tid}").status_code == 404


class TestValidationErrors:
    def test_create_blank_title(self, client):
        res = client.post("/api/tasks", json={"title": "  ", "status": "TODO"})
        assert res.status_code == 400
        body = res.json()
        assert body.get("error") == "ValidationError"
        assert body.get("message") == "Request validation failed"
        assert isinstance(body.get("detail"), list)

    def test_create_missing_status(self, client):
        res = client.post("/api/tasks", json={"title": "No status"})
        assert res.status_code == 400
        assert res.json()["error"] == "ValidationError"

    def test_create_bad_due_date(self, client):
        res = client.post("/api/tasks", json=create_task_payload(due_date="not-a-date"))
        assert res.status_code == 400

    def test_malformed_id(self, client):
        res = client.get("/api/tasks/not-a-uuid")
        assert res.status_code == 400

    def test_patch_blank_status(self, client):
        tid = client.post("/api/tasks", json=create_task_payload()).json()["id"]
        res = client.patch(f"/api/tasks/{tid}/status", params={"status": "   "})
        assert res.status_code == 400
        assert res.json()["message"] == "Status is required"

    def test_patch_missing_status_param(self, client):
        tid = client.post("/api/tasks", json=create_task_payload()).json()["id"]
        res = client.patch(f"/api/tasks/{tid}/status")
        assert res.status_code == 400

    def test_status_is_trimmed_on_create_and_patch(self, client):
        created = client.post("/api/tasks", json=create_task_payload(status=" TODO ")).json()
        assert created["status"] == "TODO"

        res = client.patch(f"/api/tasks/{created['id']}/status", params={"status": " DONE "})
        assert res.status_code == 200
        assert res.json()["status"] == "DONE"


class TestServerErrors:
    def test_storage_failure_is_generic_500(self, client, repo, monkeypatch):
        def broken():
            raise StorageError("disk I/O error at /var/lib/tasks.db")

        monkeypatch.setattr(repo, "find_all", broken)
        res = client.get("/api/tasks")
        assert res.status_code == 500
        body = res.json()
        assert body == {"error": "InternalServerError", "message": "Internal server error"}


class TestCORS:
    def preflight(self, client, origin):
        return client.options(
            "/api/tasks",
            headers={
                "Origin": origin,
                "Access-Control-Request-Method": "POST",
            },
        )

    def test_dev_frontend_origin_is_allowed(self, client):
        res = self.preflight(client, "http://localhost:3000")
        assert res.status_code == 200
        assert res.headers["access-control-allow-origin"] == "http://localhost:3000"

    def test_other_origin_is_rejected(self, client):
        res = self.preflight(client, "http://evil.example")
        assert res.status_code == 400
        assert "access-control-allow-origin" not in res.headers
