from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import optional_text, require_non_empty
from ..core.enums import SubmissionStatus, TaskEvent, TaskStatus
from ..core.exceptions import InvalidStateError, NotFoundError, ValidationError
from ..notifications.factory import NotificationFactory
from ..notifications.publisher import NotificationPublisher, publish_safely
from ..reviews.escalation import EscalationStatus, escalation_status
from ..tasks.repository import TaskRepository
from ..tasks.transitions import next_status
from .model import TaskSubmission
from .repository import SubmissionRepository

logger = logging.getLogger(__name__)

SUBMITTABLE_STATUSES = (TaskStatus.OPEN, TaskStatus.IN_PROGRESS)


class SubmissionService:
    """Use case: an assignee hands in work for a task (once)."""

    def __init__(
        self,
        submissions: SubmissionRepository,
        tasks: TaskRepository,
        *,
        publisher: NotificationPublisher,
        notification_factory: Optional[NotificationFactory] = None,
    ):
        self._submissions = submissions
        self._tasks = tasks
        self._publisher = publisher
        self._notifications = notification_factory or NotificationFactory()

    def submit(
        self,
        *,
        task_id: Optional[str],
        user_id: Optional[str],
        report: Optional[str],
        file_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TaskSubmission:
        if not task_id or not user_id or not report:
            raise ValidationError("Task ID, user ID, and report are required")
        report = require_non_empty(report, "Report")

        task = self._tasks.get_by_id(task_id)
        if not task or task.assigned_to != user_id:
            raise NotFoundError("Task not found or not assigned to this user")

        if self._submissions.get_by_task(task_id):
            raise InvalidStateError("Task already submitted")
        if task.status not in SUBMITTABLE_STATUSES:
            raise InvalidStateError(f"Cannot submit work for a task in status {task.status.value}")

        now = now or now_utc()
        submission = TaskSubmission(
            submission_id=uuid.uuid4().hex,
            task_id=task_id,
            user_id=user_id,
            report=report,
            file_url=optional_text(file_url),
            submitted_at=now,
            status=SubmissionStatus.PENDING_REVIEW,
        )
        # Storage enforces one submission per task; a lost race raises InvalidStateError here.
        self._submissions.create_submission(submission)
        logger.info("Submission %s created for task %s by %s", submission.submission_id, task_id, user_id)

        target = next_status(task.status, TaskEvent.SUBMIT)
        if target != task.status:
            # conditional: a task already moved past OPEN is left alone
            self._tasks.update_status(task_id=task_id, status=target, updated_at=now, expected=task.status)

        self._notify_reviewers(submission.submission_id, task.assigned_to)
        return submission

    def _notify_reviewers(self, submission_id: str, assignee_id: str) -> None:
        try:
            item = self._submissions.get_review_item(submission_id)
        except Exception:
            logger.exception("Could not load submission %s for notification", submission_id)
            return
        if not item:
            return
        recipient = item.assignee.manager_id
        if not recipient:
            logger.info("Assignee %s has no reporting manager; pending review not pushed", assignee_id)
            return
        publish_safely(self._publisher, recipient, self._notifications.pending_review(item))

    def get_submission_escalation(
        self, submission_id: str, *, workspace_id: str, now: Optional[datetime] = None
    ) -> EscalationStatus:
        item = self._submissions.get_review_item(submission_id)
        if not item or item.assignee.workspace_id != workspace_id:
            raise NotFoundError("Task submission not found")
        return escalation_status(item.submission, now)
