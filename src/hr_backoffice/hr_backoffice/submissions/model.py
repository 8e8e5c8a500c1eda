from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from ..common.datetime_utils import isoformat
from ..core.enums import SubmissionStatus

if TYPE_CHECKING:
    from ..tasks.model import Task
    from ..users.model import UserIdentity


@dataclass(frozen=True)
class TaskSubmission:
    """The single work-product record attached to a task.

    total_points is always derived; it is never stored.
    """

    submission_id: str
    task_id: str
    user_id: str
    report: str
    file_url: Optional[str]
    submitted_at: datetime
    status: SubmissionStatus
    base_points: int = 0
    quality_points: int = 0
    bonus_points: int = 0
    remarks: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    @property
    def total_points(self) -> int:
        return int(self.base_points or 0) + int(self.quality_points or 0) + int(self.bonus_points or 0)

    @property
    def is_pending(self) -> bool:
        return self.status == SubmissionStatus.PENDING_REVIEW

    def to_dict(self) -> dict:
        return {
            "id": self.submission_id,
            "taskId": self.task_id,
            "userId": self.user_id,
            "report": self.report,
            "fileUrl": self.file_url,
            "submittedAt": isoformat(self.submitted_at),
            "status": self.status.value,
            "basePoints": self.base_points,
            "qualityPoints": self.quality_points,
            "bonusPoints": self.bonus_points,
            "totalPoints": self.total_points,
            "remarks": self.remarks,
            "reviewedBy": self.reviewed_by,
            "reviewedAt": isoformat(self.reviewed_at),
        }


@dataclass(frozen=True)
class ReviewItem:
    """A submission joined with its task and the task's assignee."""

    submission: TaskSubmission
    task: "Task"
    assignee: "UserIdentity"

    def to_dict(self) -> dict:
        data = self.submission.to_dict()
        data["task"] = {
            "id": self.task.task_id,
            "title": self.task.title,
            "status": self.task.status.value,
            "dueAt": isoformat(self.task.due_at),
        }
        data["assignee"] = {
            "id": self.assignee.user_id,
            "name": self.assignee.full_name,
            "email": self.assignee.email,
            "role": self.assignee.role.value,
        }
        return data
