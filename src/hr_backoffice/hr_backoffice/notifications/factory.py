from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import ESCALATION_THRESHOLD_HOURS
from ..core.enums import NotificationPriority, NotificationType, SubmissionStatus
from ..submissions.model import ReviewItem
from .model import Notification


@dataclass
class NotificationFactory:
    """Factory Pattern: build the notification record for each workflow event.

    created_at is the submission time so feeds stay stable between reads.
    """

    def pending_review(self, item: ReviewItem) -> Notification:
        return Notification(
            notification_id=f"review_{item.submission.submission_id}",
            type=NotificationType.PENDING_REVIEW,
            title="Task Review Required",
            message=f'Task "{item.task.title}" submitted by {item.assignee.full_name} needs your review',
            priority=NotificationPriority.MEDIUM,
            created_at=item.submission.submitted_at,
            payload=item.to_dict(),
        )

    def escalation(self, item: ReviewItem) -> Notification:
        return Notification(
            notification_id=f"escalation_{item.submission.submission_id}",
            type=NotificationType.ESCALATION,
            title="Review Escalation",
            message=(
                f'Task "{item.task.title}" has been pending review for over {ESCALATION_THRESHOLD_HOURS} hours'
            ),
            priority=NotificationPriority.HIGH,
            created_at=item.submission.submitted_at,
            payload=item.to_dict(),
        )

    def submission_reviewed(self, item: ReviewItem) -> Notification:
        approved = item.submission.status == SubmissionStatus.APPROVED
        return Notification(
            notification_id=f"submission_{item.submission.submission_id}",
            type=NotificationType.SUBMISSION_REVIEWED,
            title=f"Task {'Approved' if approved else 'Rejected'}",
            message=f'Your submission for "{item.task.title}" has been {item.submission.status.value}',
            priority=NotificationPriority.LOW if approved else NotificationPriority.MEDIUM,
            created_at=item.submission.submitted_at,
            payload=item.to_dict(),
        )
