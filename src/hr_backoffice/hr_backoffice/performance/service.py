from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import parse_enum
from ..core.constants import POSSIBLE_POINTS_PER_TASK
from ..core.enums import PerformancePeriod, TaskStatus
from ..core.exceptions import ValidationError
from ..reviews.scoring.on_time_policy import is_on_time
from ..tasks.model import TaskDetail
from ..tasks.repository import TaskRepository
from .model import PerformanceReport, UserPerformance, WorkspacePerformance
from .period import period_start


class PerformanceReportService:
    """Rolls task/submission data up into per-user and workspace statistics."""

    def __init__(self, tasks: TaskRepository):
        self._tasks = tasks

    def performance_for(
        self,
        *,
        workspace_id: Optional[str],
        user_id: Optional[str] = None,
        period=PerformancePeriod.ALL,
        now: Optional[datetime] = None,
    ) -> PerformanceReport:
        if not workspace_id:
            raise ValidationError("Workspace ID is required")
        period = parse_enum(PerformancePeriod, period or PerformancePeriod.ALL, "period")
        now = now or now_utc()

        details = self._tasks.list_for_workspace(
            workspace_id=workspace_id,
            created_since=period_start(period, now),
            assigned_to=user_id or None,
        )

        by_user: dict[str, UserPerformance] = {}
        for d in details:
            self._accumulate(by_user, d, now)

        users = sorted(by_user.values(), key=lambda u: u.total_points_earned, reverse=True)
        return PerformanceReport(users=users, workspace=self._rollup(users), period=period, user_id=user_id)

    @staticmethod
    def _accumulate(by_user: dict[str, UserPerformance], detail: TaskDetail, now: datetime) -> None:
        task = detail.task
        s = by_user.get(task.assigned_to)
        if not s:
            assignee = detail.assignee
            s = UserPerformance(
                user_id=task.assigned_to,
                user_name=assignee.full_name if assignee else "",
                user_email=assignee.email if assignee else "",
                role=(assignee.role if assignee else task.assigned_role).value,
            )
            by_user[task.assigned_to] = s

        s.total_tasks += 1
        s.total_possible_points += POSSIBLE_POINTS_PER_TASK
        if task.is_overdue(now):
            s.overdue_tasks += 1
        if task.status == TaskStatus.DONE:
            s.completed_tasks += 1
        elif task.status == TaskStatus.OPEN:
            s.pending_tasks += 1

        sub = detail.submission
        if sub is None:
            return
        s.total_points_earned += sub.total_points
        s.total_bonus_points += sub.bonus_points
        if is_on_time(task, sub):
            s.on_time_submissions += 1
        else:
            s.late_submissions += 1
        # average quality covers completed tasks only
        if task.status == TaskStatus.DONE and sub.quality_points > 0:
            s.quality_scores.append(sub.quality_points)

    @staticmethod
    def _rollup(users: list[UserPerformance]) -> WorkspacePerformance:
        n = len(users)
        return WorkspacePerformance(
            total_users=n,
            total_tasks=sum(u.total_tasks for u in users),
            total_completed_tasks=sum(u.completed_tasks for u in users),
            total_points_earned=sum(u.total_points_earned for u in users),
            average_completion_rate=round(sum(u.completion_rate for u in users) / n, 2) if n else 0.0,
            average_points_efficiency=round(sum(u.points_efficiency for u in users) / n, 2) if n else 0.0,
        )
