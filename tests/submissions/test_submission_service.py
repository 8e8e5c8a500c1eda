from __future__ import annotations

from datetime import timedelta

import pytest

from src.hr_backoffice.hr_backoffice.container import wire_container
from src.hr_backoffice.hr_backoffice.core.enums import NotificationType, Role, SubmissionStatus, TaskStatus
from src.hr_backoffice.hr_backoffice.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from tests.fakes import (
    NOW,
    OTHER_WS,
    WS,
    FailingPublisher,
    InMemoryIdentity,
    InMemorySubmissions,
    InMemoryTasks,
    make_submission,
    make_task,
)


def test_submit_creates_pending_submission_and_starts_task(container, store, publisher):
    make_task(store, "t1")

    sub = container.submission_service.submit(
        task_id="t1", user_id="emp-1", report="  Finished ", file_url="https://files/x.pdf", now=NOW
    )

    assert sub.status == SubmissionStatus.PENDING_REVIEW
    assert sub.report == "Finished"
    assert sub.total_points == 0
    assert store.tasks["t1"].status == TaskStatus.IN_PROGRESS

    [(recipient, notification)] = publisher.sent
    assert recipient == "mgr-1"
    assert notification.type == NotificationType.PENDING_REVIEW
    assert notification.notification_id == f"review_{sub.submission_id}"


def test_second_submission_is_rejected(container, store):
    make_task(store, "t1")
    container.submission_service.submit(task_id="t1", user_id="emp-1", report="v1", now=NOW)

    with pytest.raises(InvalidStateError):
        container.submission_service.submit(task_id="t1", user_id="emp-1", report="v2", now=NOW)
    assert len(store.submissions) == 1


def test_submission_in_progress_task_keeps_status(container, store):
    make_task(store, "t1", status=TaskStatus.IN_PROGRESS)
    container.submission_service.submit(task_id="t1", user_id="emp-1", report="done", now=NOW)
    assert store.tasks["t1"].status == TaskStatus.IN_PROGRESS


@pytest.mark.parametrize("status", [TaskStatus.DONE, TaskStatus.CANCELLED, TaskStatus.BLOCKED])
def test_closed_or_blocked_task_cannot_be_submitted(container, store, status):
    make_task(store, "t1", status=status)
    with pytest.raises(InvalidStateError):
        container.submission_service.submit(task_id="t1", user_id="emp-1", report="done")
    assert store.submissions == {}


def test_only_assignee_can_submit(container, store):
    make_task(store, "t1")
    with pytest.raises(NotFoundError):
        container.submission_service.submit(task_id="t1", user_id="emp-2", report="done")
    with pytest.raises(NotFoundError):
        container.submission_service.submit(task_id="missing", user_id="emp-1", report="done")


@pytest.mark.parametrize("report", [None, "", "   "])
def test_report_is_required(container, store, report):
    make_task(store, "t1")
    with pytest.raises(ValidationError):
        container.submission_service.submit(task_id="t1", user_id="emp-1", report=report)


def test_lost_race_surfaces_as_already_submitted(store):
    class RacingSubmissions(InMemorySubmissions):
        # the pre-check misses a submission written by a concurrent request
        def get_by_task(self, task_id):
            return None

    make_task(store, "t1")
    make_submission(store, "s-other", "t1")
    container = wire_container(
        identity_repo=InMemoryIdentity(store),
        tasks_repo=InMemoryTasks(store),
        submissions_repo=RacingSubmissions(store),
    )

    with pytest.raises(InvalidStateError, match="already submitted"):
        container.submission_service.submit(task_id="t1", user_id="emp-1", report="dup", now=NOW)
    assert list(store.submissions) == ["s-other"]
    assert store.tasks["t1"].status == TaskStatus.OPEN


def test_publisher_failure_does_not_undo_submission(store):
    make_task(store, "t1")
    container = wire_container(
        identity_repo=InMemoryIdentity(store),
        tasks_repo=InMemoryTasks(store),
        submissions_repo=InMemorySubmissions(store),
        publisher=FailingPublisher(),
    )

    sub = container.submission_service.submit(task_id="t1", user_id="emp-1", report="done", now=NOW)

    assert store.submissions[sub.submission_id].is_pending


def test_assignee_without_manager_is_not_pushed(container, store, publisher):
    store.add_user("solo", Role.EMPLOYEE)
    make_task(store, "t1", assigned_to="solo")

    container.submission_service.submit(task_id="t1", user_id="solo", report="done", now=NOW)

    assert publisher.sent == []


@pytest.mark.parametrize("hours, expected", [(47, False), (48, False), (49, True)])
def test_escalation_threshold(container, store, hours, expected):
    make_task(store, "t1")
    make_submission(store, "s1", "t1", submitted_at=NOW - timedelta(hours=hours))

    status = container.submission_service.get_submission_escalation("s1", workspace_id=WS, now=NOW)

    assert status.needs_escalation is expected
    assert status.to_dict()["hoursSinceSubmission"] == hours


def test_reviewed_submission_never_escalates(container, store):
    make_task(store, "t1")
    make_submission(store, "s1", "t1", submitted_at=NOW - timedelta(days=5), status=SubmissionStatus.REJECTED)

    assert container.submission_service.get_submission_escalation("s1", workspace_id=WS, now=NOW).needs_escalation is False


def test_escalation_for_unknown_submission(container):
    with pytest.raises(NotFoundError):
        container.submission_service.get_submission_escalation("missing", workspace_id=WS, now=NOW)


def test_escalation_is_scoped_to_workspace(container, store):
    make_task(store, "t1")
    make_submission(store, "s1", "t1", submitted_at=NOW - timedelta(hours=60))

    with pytest.raises(NotFoundError):
        container.submission_service.get_submission_escalation("s1", workspace_id=OTHER_WS, now=NOW)


def test_hours_round_half_up(container, store):
    make_task(store, "t1")
    make_submission(store, "s1", "t1", submitted_at=NOW - timedelta(hours=50, minutes=30))

    status = container.submission_service.get_submission_escalation("s1", workspace_id=WS, now=NOW)

    assert status.to_dict()["hoursSinceSubmission"] == 51
