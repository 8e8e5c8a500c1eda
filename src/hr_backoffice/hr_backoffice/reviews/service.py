from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import optional_text, parse_enum, require_points
from ..core.constants import MAX_BONUS_POINTS, MAX_QUALITY_POINTS
from ..core.enums import Role, SubmissionStatus, TaskEvent
from ..core.exceptions import AuthorizationError, InvalidStateError, NotFoundError, ValidationError
from ..notifications.factory import NotificationFactory
from ..notifications.publisher import NotificationPublisher, publish_safely
from ..submissions.model import ReviewItem, TaskSubmission
from ..submissions.repository import SubmissionRepository
from ..tasks.repository import TaskRepository
from ..tasks.transitions import next_status
from ..users.service import IdentityService
from .escalation import hours_since, needs_escalation, rounded_hours
from .scoring.base import ScoringPolicy
from .scoring.on_time_policy import OnTimeScoringPolicy
from .visibility import can_review, visible_submissions

logger = logging.getLogger(__name__)

DECISIONS = (SubmissionStatus.APPROVED, SubmissionStatus.REJECTED)


@dataclass(frozen=True)
class QueueEntry:
    item: ReviewItem
    hours_since_submission: float
    needs_escalation: bool

    def to_dict(self) -> dict:
        data = self.item.to_dict()
        data["hoursSinceSubmission"] = rounded_hours(self.hours_since_submission)
        data["needsEscalation"] = self.needs_escalation
        return data


class ReviewService:
    """Use case: reviewers approve/reject submissions and work their queue."""

    def __init__(
        self,
        submissions: SubmissionRepository,
        tasks: TaskRepository,
        identity: IdentityService,
        *,
        publisher: NotificationPublisher,
        scoring: Optional[ScoringPolicy] = None,
        notification_factory: Optional[NotificationFactory] = None,
    ):
        self._submissions = submissions
        self._tasks = tasks
        self._identity = identity
        self._publisher = publisher
        self._scoring = scoring or OnTimeScoringPolicy()
        self._notifications = notification_factory or NotificationFactory()

    def review(
        self,
        *,
        submission_id: str,
        reviewer_id: Optional[str],
        reviewer_role,
        workspace_id: Optional[str],
        decision,
        quality_points: Optional[int] = None,
        bonus_points: Optional[int] = None,
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TaskSubmission:
        if not reviewer_id or not reviewer_role or not decision or not workspace_id:
            raise ValidationError("Reviewer ID, role, status, and workspace ID are required")
        status = parse_enum(SubmissionStatus, decision, "decision")
        if status not in DECISIONS:
            raise ValidationError("Invalid decision. Must be one of: approved, rejected")
        claimed_role = parse_enum(Role, reviewer_role, "role")

        item = self._submissions.get_review_item(submission_id)
        if not item:
            raise NotFoundError("Task submission not found")
        if not item.submission.is_pending:
            raise InvalidStateError("Task submission is already reviewed")

        reviewer = self._identity.resolve_actor(reviewer_id, workspace_id, claimed_role=claimed_role, label="Reviewer")
        if not reviewer.is_reviewer:
            raise AuthorizationError("Only admins and managers can review submissions")
        if not can_review(item, reviewer):
            raise AuthorizationError("You are not allowed to review this submission")

        quality = require_points(quality_points, "Quality points", maximum=MAX_QUALITY_POINTS)
        bonus = require_points(bonus_points, "Bonus points", maximum=MAX_BONUS_POINTS)
        # never taken from the caller
        base = self._scoring.base_points(item.task, item.submission)

        now = now or now_utc()
        decided = self._submissions.decide(
            submission_id=submission_id,
            status=status,
            base_points=base,
            quality_points=quality,
            bonus_points=bonus,
            remarks=optional_text(remarks),
            reviewed_by=reviewer.user_id,
            reviewed_at=now,
        )
        if not decided:
            raise InvalidStateError("Task submission is already reviewed")
        logger.info(
            "Submission %s %s by %s (base=%s quality=%s bonus=%s)",
            submission_id,
            status.value,
            reviewer.user_id,
            base,
            quality,
            bonus,
        )

        if status == SubmissionStatus.APPROVED:
            target = next_status(item.task.status, TaskEvent.APPROVE)
            self._tasks.update_status(task_id=item.task.task_id, status=target, updated_at=now)
        # A rejection leaves the task as it is.

        updated = self._submissions.get_review_item(submission_id)
        if updated:
            publish_safely(self._publisher, updated.submission.user_id, self._notifications.submission_reviewed(updated))
            return updated.submission
        return self._submissions.get_by_id(submission_id) or item.submission

    def review_queue(
        self,
        *,
        reviewer_id: Optional[str],
        reviewer_role,
        workspace_id: Optional[str],
        now: Optional[datetime] = None,
    ) -> list[QueueEntry]:
        if not reviewer_id or not reviewer_role or not workspace_id:
            raise ValidationError("Reviewer ID, role, and workspace ID are required")
        claimed_role = parse_enum(Role, reviewer_role, "role")

        reviewer = self._identity.resolve_actor(reviewer_id, workspace_id, claimed_role=claimed_role, label="Reviewer")
        if not reviewer.is_reviewer:
            raise AuthorizationError("Only admins and managers have a review queue")

        now = now or now_utc()
        pending = self._submissions.list_pending_for_workspace(workspace_id)
        return [
            QueueEntry(
                item=item,
                hours_since_submission=hours_since(item.submission.submitted_at, now),
                needs_escalation=needs_escalation(item.submission, now),
            )
            for item in visible_submissions(pending, reviewer.user_id, reviewer.role, workspace_id)
        ]
