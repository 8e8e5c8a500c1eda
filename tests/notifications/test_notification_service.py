from __future__ import annotations

from datetime import timedelta

import pytest

from src.hr_backoffice.hr_backoffice.core.enums import NotificationPriority, NotificationType, SubmissionStatus
from src.hr_backoffice.hr_backoffice.core.exceptions import NotFoundError, ValidationError
from tests.fakes import NOW, WS, make_submission, make_task


@pytest.fixture
def workflow(store):
    make_task(store, "t1", title="Quarterly report")
    make_task(store, "t2", assigned_to="emp-2")
    make_task(store, "t3", assigned_to="emp-3", created_by="mgr-2")
    make_submission(store, "s1", "t1", submitted_at=NOW - timedelta(hours=50))
    make_submission(store, "s2", "t2", submitted_at=NOW - timedelta(hours=2))
    make_submission(store, "s3", "t3", submitted_at=NOW - timedelta(hours=70))


def test_manager_feed_has_pending_reviews_and_escalations(container, workflow):
    feed = container.notification_service.notifications_for(user_id="mgr-1", workspace_id=WS, now=NOW)

    assert [n.notification_id for n in feed] == ["escalation_s1", "review_s2", "review_s1"]
    assert feed[0].priority == NotificationPriority.HIGH
    assert feed[0].message == 'Task "Quarterly report" has been pending review for over 48 hours'
    assert feed[2].message == 'Task "Quarterly report" submitted by EMP-1 needs your review'


def test_feed_kind_filter(container, workflow):
    feed = container.notification_service.notifications_for(
        user_id="admin", workspace_id=WS, kind="escalations", now=NOW
    )
    assert {n.notification_id for n in feed} == {"escalation_s1", "escalation_s3"}
    assert all(n.type == NotificationType.ESCALATION for n in feed)

    with pytest.raises(ValidationError):
        container.notification_service.notifications_for(user_id="admin", workspace_id=WS, kind="urgent")


def test_employee_feed_lists_reviewed_work(container, store):
    make_task(store, "t1")
    make_task(store, "t2")
    make_submission(store, "s1", "t1", status=SubmissionStatus.APPROVED, submitted_at=NOW - timedelta(days=2))
    make_submission(store, "s2", "t2", status=SubmissionStatus.REJECTED, submitted_at=NOW - timedelta(days=1))

    feed = container.notification_service.notifications_for(user_id="emp-1", workspace_id=WS, now=NOW)

    # rejected is medium priority, approved low
    assert [(n.notification_id, n.title) for n in feed] == [
        ("submission_s2", "Task Rejected"),
        ("submission_s1", "Task Approved"),
    ]


def test_reviewed_feed_is_capped(container, store):
    for i in range(12):
        make_task(store, f"t{i}")
        make_submission(store, f"s{i}", f"t{i}", status=SubmissionStatus.APPROVED, submitted_at=NOW - timedelta(hours=i))

    feed = container.notification_service.notifications_for(user_id="emp-1", workspace_id=WS, now=NOW)

    assert len(feed) == 10
    assert feed[0].notification_id == "submission_s0"


def test_unknown_user_has_no_feed(container):
    with pytest.raises(NotFoundError):
        container.notification_service.notifications_for(user_id="outsider", workspace_id=WS)


def test_create_notification_publishes(container, publisher):
    n = container.notification_service.create_notification(
        user_id="emp-1",
        workspace_id=WS,
        type="custom",
        title="Heads up",
        message="Office closed Friday",
        payload={"day": "friday"},
        now=NOW,
    )

    assert n.priority == NotificationPriority.MEDIUM
    assert n.to_dict()["data"] == {"day": "friday"}
    assert n.to_dict()["createdAt"] == "2026-03-02T09:00:00Z"
    assert publisher.sent == [("emp-1", n)]


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"type": "memo"}, ValidationError),
        ({"title": None}, ValidationError),
        ({"priority": "urgent"}, ValidationError),
        ({"payload": ["x"]}, ValidationError),
        ({"user_id": "outsider"}, NotFoundError),
    ],
)
def test_create_notification_errors(container, publisher, overrides, error):
    kwargs = dict(user_id="emp-1", workspace_id=WS, type="custom", title="t", message="m")
    kwargs.update(overrides)
    with pytest.raises(error):
        container.notification_service.create_notification(**kwargs)
    assert publisher.sent == []
