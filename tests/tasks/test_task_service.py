from __future__ import annotations

from datetime import timedelta

import pytest

from src.hr_backoffice.hr_backoffice.core.enums import Role, TaskPriority, TaskStatus, TaskView
from src.hr_backoffice.hr_backoffice.core.exceptions import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.hr_backoffice.hr_backoffice.tasks.model import TaskFilter
from src.hr_backoffice.hr_backoffice.tasks.service import TaskService
from src.hr_backoffice.hr_backoffice.users.service import IdentityService
from tests.fakes import NOW, OTHER_WS, WS, InMemoryIdentity, InMemoryTasks, make_submission, make_task


def _create(container, **overrides):
    kwargs = dict(
        workspace_id=WS,
        creator_id="mgr-1",
        creator_role="MANAGER",
        title="Write onboarding guide",
        start_date="2026-03-02",
        assigned_to="emp-1",
        now=NOW,
    )
    kwargs.update(overrides)
    return container.task_service.create_task(**kwargs)


def test_manager_creates_task_for_employee(container, store):
    task = _create(container, due_at="2026-03-05T17:00:00Z", priority="HIGH")

    assert task.status == TaskStatus.OPEN
    assert task.priority == TaskPriority.HIGH
    assert task.assigned_role == Role.EMPLOYEE
    assert task.created_role == Role.MANAGER
    assert task.assigned_by == "mgr-1"
    assert task.due_at.isoformat() == "2026-03-05T17:00:00+00:00"
    assert store.tasks[task.task_id] == task


def test_priority_defaults_to_medium(container):
    assert _create(container).priority == TaskPriority.MEDIUM


@pytest.mark.parametrize("assignee", ["mgr-1", "admin"])
def test_employee_cannot_assign_upwards(container, store, assignee):
    with pytest.raises(AuthorizationError):
        _create(container, creator_id="emp-1", creator_role="EMPLOYEE", assigned_to=assignee)
    assert store.tasks == {}


def test_employee_may_assign_to_peer(container):
    task = _create(container, creator_id="emp-1", creator_role="EMPLOYEE", assigned_to="emp-3")
    assert task.created_role == Role.EMPLOYEE


def test_claimed_role_must_match_identity(container):
    with pytest.raises(AuthorizationError):
        _create(container, creator_id="emp-1", creator_role="ADMIN", assigned_to="mgr-1")


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": ""},
        {"start_date": None},
        {"assigned_to": None},
        {"start_date": "not-a-date"},
        {"priority": "URGENT"},
        {"end_date": "2026-03-01"},
    ],
)
def test_create_validation(container, overrides):
    with pytest.raises(ValidationError):
        _create(container, **overrides)


def test_assignee_outside_workspace_is_not_found(container):
    with pytest.raises(NotFoundError):
        _create(container, assigned_to="outsider")


def test_set_status_follows_transition_table(container, store):
    make_task(store, "t1")

    task = container.task_service.set_status("t1", "IN_PROGRESS", workspace_id=WS, now=NOW)
    assert task.status == TaskStatus.IN_PROGRESS

    task = container.task_service.set_status("t1", "DONE", workspace_id=WS, now=NOW)
    assert task.status == TaskStatus.DONE


def test_set_status_rejects_skipping_ahead(container, store):
    make_task(store, "t1")
    with pytest.raises(InvalidStateError):
        container.task_service.set_status("t1", "DONE", workspace_id=WS)
    assert store.tasks["t1"].status == TaskStatus.OPEN


def test_set_status_same_value_is_noop(container, store):
    task = make_task(store, "t1", status=TaskStatus.BLOCKED)
    assert container.task_service.set_status("t1", "BLOCKED", workspace_id=WS) == task


def test_set_status_errors(container, store):
    make_task(store, "t1")
    with pytest.raises(ValidationError):
        container.task_service.set_status("t1", "ARCHIVED", workspace_id=WS)
    with pytest.raises(ValidationError):
        container.task_service.set_status("t1", None, workspace_id=WS)
    with pytest.raises(NotFoundError):
        container.task_service.set_status("missing", "IN_PROGRESS", workspace_id=WS)


def test_update_task_fields(container, store):
    make_task(store, "t1")
    updated = container.task_service.update_task(
        "t1",
        {"title": "  New title ", "assigned_to": "emp-2", "due_at": "2026-03-10"},
        workspace_id=WS,
        now=NOW,
    )

    assert updated.title == "New title"
    assert updated.assigned_to == "emp-2"
    assert updated.updated_at == NOW
    # snapshot from creation time stays
    assert updated.assigned_role == Role.EMPLOYEE


def test_update_task_rejects_status_and_foreign_assignee(container, store):
    make_task(store, "t1")
    with pytest.raises(ValidationError):
        container.task_service.update_task("t1", {"status": "DONE"}, workspace_id=WS)
    with pytest.raises(NotFoundError):
        container.task_service.update_task("t1", {"assigned_to": "outsider"}, workspace_id=WS)
    with pytest.raises(NotFoundError):
        container.task_service.update_task("missing", {"title": "x"}, workspace_id=WS)


def test_delete_removes_submission_too(container, store):
    make_task(store, "t1")
    make_submission(store, "s1", "t1")

    container.task_service.delete_task("t1", workspace_id=WS)

    assert "t1" not in store.tasks
    assert store.submissions == {}
    with pytest.raises(NotFoundError):
        container.task_service.delete_task("t1", workspace_id=WS)


def test_failed_delete_keeps_the_submission(store):
    class BrokenTasks(InMemoryTasks):
        def delete_with_submission(self, task_id):
            raise RuntimeError("connection lost")

    make_task(store, "t1")
    make_submission(store, "s1", "t1")
    service = TaskService(BrokenTasks(store), IdentityService(InMemoryIdentity(store)))

    with pytest.raises(RuntimeError):
        service.delete_task("t1", workspace_id=WS)
    assert "t1" in store.tasks
    assert "s1" in store.submissions


def test_task_of_other_workspace_is_not_found(container, store):
    task = make_task(store, "t1")
    make_submission(store, "s1", "t1")
    svc = container.task_service

    with pytest.raises(NotFoundError):
        svc.get_task("t1", workspace_id=OTHER_WS)
    with pytest.raises(NotFoundError):
        svc.update_task("t1", {"title": "Hijacked"}, workspace_id=OTHER_WS)
    with pytest.raises(NotFoundError):
        svc.set_status("t1", "CANCELLED", workspace_id=OTHER_WS)
    with pytest.raises(NotFoundError):
        svc.delete_task("t1", workspace_id=OTHER_WS)

    assert store.tasks["t1"] == task
    assert "s1" in store.submissions


def test_list_tasks_filters_and_overdue_flag(container, store):
    make_task(store, "t1", due_at=NOW - timedelta(hours=1), created_at=NOW - timedelta(days=2))
    make_task(store, "t2", assigned_to="emp-3", created_by="mgr-2", created_at=NOW - timedelta(days=1))
    make_task(store, "t3", assigned_to="outsider", created_by="outsider")

    rows = container.task_service.list_tasks(TaskFilter(workspace_id=WS), now=NOW)
    assert [r["id"] for r in rows] == ["t2", "t1"]
    assert rows[1]["isOverdue"] is True
    assert rows[1]["assignee"]["id"] == "emp-1"

    mine = container.task_service.list_tasks(
        TaskFilter(workspace_id=WS, view=TaskView.CREATED, current_user_id="mgr-2"), now=NOW
    )
    assert [r["id"] for r in mine] == ["t2"]

    with pytest.raises(ValidationError):
        container.task_service.list_tasks(TaskFilter(workspace_id=""))


def test_done_task_is_never_overdue(container, store):
    make_task(store, "t1", status=TaskStatus.DONE, due_at=NOW - timedelta(days=1))
    detail = container.task_service.get_task("t1", workspace_id=WS)
    assert detail.to_dict(now=NOW)["isOverdue"] is False


def test_list_assigned_requires_workspace_member(container, store):
    make_task(store, "t1")
    make_task(store, "t2", assigned_to="emp-2")

    rows = container.task_service.list_assigned(user_id="emp-1", workspace_id=WS, now=NOW)
    assert [r["id"] for r in rows] == ["t1"]
    with pytest.raises(NotFoundError):
        container.task_service.list_assigned(user_id="outsider", workspace_id=WS)


def test_task_stats(container, store):
    make_task(store, "t1")
    make_task(store, "t2", status=TaskStatus.IN_PROGRESS, due_at=NOW - timedelta(days=1))
    make_task(store, "t3", status=TaskStatus.DONE, due_at=NOW - timedelta(days=1))

    stats = container.task_service.task_stats(WS, now=NOW)

    assert stats.to_dict() == {
        "totalTasks": 3,
        "completedTasks": 1,
        "pendingTasks": 1,
        "inProgressTasks": 1,
        "overdueTasks": 1,
    }
