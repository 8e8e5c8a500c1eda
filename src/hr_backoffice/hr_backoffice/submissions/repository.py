from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SubmissionStatus
from .model import ReviewItem, TaskSubmission


class SubmissionRepository(Protocol):
    def create_submission(self, submission: TaskSubmission) -> str:
        """Insert; raises InvalidStateError if the task already has a submission."""

        raise NotImplementedError

    def get_by_id(self, submission_id: str) -> Optional[TaskSubmission]:
        raise NotImplementedError

    def get_by_task(self, task_id: str) -> Optional[TaskSubmission]:
        raise NotImplementedError

    def get_review_item(self, submission_id: str) -> Optional[ReviewItem]:
        raise NotImplementedError

    def decide(
        self,
        *,
        submission_id: str,
        status: SubmissionStatus,
        base_points: int,
        quality_points: int,
        bonus_points: int,
        remarks: Optional[str],
        reviewed_by: str,
        reviewed_at: datetime,
    ) -> bool:
        """Apply a review only while the submission is still pending_review."""

        raise NotImplementedError

    def list_pending_for_workspace(self, workspace_id: str) -> Sequence[ReviewItem]:
        """Pending submissions whose task assignee is in the workspace, oldest first."""

        raise NotImplementedError

    def list_reviewed_for_user(self, user_id: str, *, limit: int) -> Sequence[ReviewItem]:
        """Approved/rejected submissions of a user, newest submitted_at first."""

        raise NotImplementedError
