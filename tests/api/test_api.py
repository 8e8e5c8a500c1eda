from __future__ import annotations

from datetime import timedelta

import pytest

from src.hr_backoffice.hr_backoffice.common.datetime_utils import now_utc
from src.hr_backoffice.hr_backoffice.core.enums import TaskStatus
from src.hr_backoffice.hr_backoffice.main import create_app
from tests.fakes import OTHER_WS, WS, make_submission, make_task


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def sign_in(client, user_id: str, role: str, workspace_id: str = WS) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["workspace_id"] = workspace_id
        sess["role"] = role


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "data": {"status": "ok"}}


def test_requires_session(client):
    resp = client.get("/api/tasks")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_create_and_fetch_task(client):
    sign_in(client, "mgr-1", "MANAGER")
    resp = client.post(
        "/api/tasks",
        json={"title": "Plan offsite", "startDate": "2026-03-02", "assignedTo": "emp-1", "priority": "HIGH"},
    )
    assert resp.status_code == 201
    task = resp.get_json()["data"]
    assert task["status"] == "OPEN"
    assert task["assignedRole"] == "EMPLOYEE"

    resp = client.get(f"/api/tasks/{task['id']}")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["assignee"]["id"] == "emp-1"


def test_employee_cannot_assign_to_manager(client, store):
    sign_in(client, "emp-1", "EMPLOYEE")
    resp = client.post("/api/tasks", json={"title": "x", "startDate": "2026-03-02", "assignedTo": "mgr-1"})
    assert resp.status_code == 403
    assert store.tasks == {}


def test_unknown_task_and_bad_body(client):
    sign_in(client, "mgr-1", "MANAGER")
    assert client.get("/api/tasks/missing").status_code == 404

    resp = client.post("/api/tasks", json=["not", "an", "object"])
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Request body must be a JSON object"


def test_list_tasks_query_filters(client, store):
    make_task(store, "t1", title="Budget review")
    make_task(store, "t2", title="Hiring plan", status=TaskStatus.IN_PROGRESS)
    sign_in(client, "mgr-1", "MANAGER")

    data = client.get("/api/tasks?status=all&search=budget").get_json()["data"]
    assert [t["id"] for t in data] == ["t1"]

    assert client.get("/api/tasks?status=LATER").status_code == 400


def test_status_endpoint_enforces_transitions(client, store):
    make_task(store, "t1")
    sign_in(client, "mgr-1", "MANAGER")

    assert client.patch("/api/tasks/t1/status", json={"status": "DONE"}).status_code == 409
    resp = client.patch("/api/tasks/t1/status", json={"status": "IN_PROGRESS"})
    assert resp.get_json()["data"]["status"] == "IN_PROGRESS"


def test_update_and_delete_task(client, store):
    make_task(store, "t1")
    sign_in(client, "mgr-1", "MANAGER")

    resp = client.put("/api/tasks/t1", json={"title": "Renamed", "assignedTo": "emp-2"})
    assert resp.get_json()["data"]["assignedTo"] == "emp-2"
    assert client.put("/api/tasks/t1", json={"status": "DONE"}).status_code == 400

    resp = client.delete("/api/tasks/t1")
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Task deleted successfully"
    assert "t1" not in store.tasks


def test_submit_review_flow(client, store):
    make_task(store, "t1", due_at=now_utc() + timedelta(days=1))

    sign_in(client, "emp-1", "EMPLOYEE")
    resp = client.post("/api/tasks/submission", json={"taskId": "t1", "report": "All done"})
    assert resp.status_code == 201
    submission_id = resp.get_json()["data"]["id"]

    dup = client.post("/api/tasks/submission", json={"taskId": "t1", "report": "Again"})
    assert dup.status_code == 409

    # another team's manager can neither see nor review it
    sign_in(client, "mgr-2", "MANAGER")
    assert client.get("/api/tasks/reviews/pending").get_json()["data"] == []
    assert client.post(f"/api/tasks/submission/{submission_id}/review", json={"status": "approved"}).status_code == 403

    sign_in(client, "mgr-1", "MANAGER")
    pending = client.get("/api/tasks/reviews/pending").get_json()["data"]
    assert [p["id"] for p in pending] == [submission_id]
    assert pending[0]["needsEscalation"] is False

    resp = client.post(
        f"/api/tasks/submission/{submission_id}/review",
        json={"status": "approved", "qualityPoints": 9, "bonusPoints": 3, "remarks": "great"},
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Task submission approved"
    assert body["data"]["totalPoints"] == 17
    assert client.get("/api/tasks/t1").get_json()["data"]["status"] == "DONE"

    again = client.post(f"/api/tasks/submission/{submission_id}/review", json={"status": "rejected"})
    assert again.status_code == 409


def test_escalation_endpoint(client, store):
    make_task(store, "t1")
    make_submission(store, "s1", "t1", submitted_at=now_utc() - timedelta(hours=49))
    sign_in(client, "mgr-1", "MANAGER")

    data = client.get("/api/tasks/submission/s1/review").get_json()["data"]
    assert data["needsEscalation"] is True
    assert data["submission"]["id"] == "s1"


def test_other_workspace_cannot_reach_tasks(client, store):
    task = make_task(store, "t1")
    make_submission(store, "s1", "t1")
    sign_in(client, "outsider", "ADMIN", OTHER_WS)

    assert client.get("/api/tasks/t1").status_code == 404
    assert client.put("/api/tasks/t1", json={"title": "Hijacked"}).status_code == 404
    assert client.patch("/api/tasks/t1/status", json={"status": "CANCELLED"}).status_code == 404
    assert client.delete("/api/tasks/t1").status_code == 404
    assert client.get("/api/tasks/submission/s1/review").status_code == 404
    assert store.tasks["t1"] == task
    assert "s1" in store.submissions


def test_submit_uses_the_signed_in_user(client, store):
    make_task(store, "t1")
    make_task(store, "t2", assigned_to="emp-2")
    sign_in(client, "emp-2", "EMPLOYEE")

    resp = client.post("/api/tasks/submission", json={"taskId": "t1", "userId": "emp-1", "report": "Not mine"})
    assert resp.status_code == 403
    assert store.submission_for("t1") is None

    resp = client.post("/api/tasks/submission", json={"taskId": "t2", "userId": "emp-2", "report": "Mine"})
    assert resp.status_code == 201
    assert store.submission_for("t2").user_id == "emp-2"


def test_notifications_and_performance(client, store, publisher):
    make_task(store, "t1")
    make_submission(store, "s1", "t1", submitted_at=now_utc() - timedelta(hours=1))
    sign_in(client, "mgr-1", "MANAGER")

    body = client.get("/api/tasks/notifications").get_json()
    assert body["count"] == 1
    assert body["data"][0]["type"] == "pending_review"

    resp = client.post(
        "/api/tasks/notifications",
        json={"userId": "emp-1", "type": "custom", "title": "Hi", "message": "Welcome", "priority": "low"},
    )
    assert resp.status_code == 201
    assert publisher.sent[-1][0] == "emp-1"

    report = client.get("/api/tasks/performance?period=month&userId=all").get_json()["data"]
    assert set(report) == {"users", "workspaceStats", "period"}
    assert report["period"] == "month"


def test_stats_and_assigned(client, store):
    make_task(store, "t1")
    make_task(store, "t2", assigned_to="emp-2")
    sign_in(client, "emp-1", "EMPLOYEE")

    assert [t["id"] for t in client.get("/api/tasks/assigned").get_json()["data"]] == ["t1"]
    assert client.get("/api/tasks/stats").get_json()["data"]["totalTasks"] == 2
