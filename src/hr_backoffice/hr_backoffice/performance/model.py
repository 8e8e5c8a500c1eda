from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import PerformancePeriod


def pct(part: float, whole: float) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0.0


@dataclass
class UserPerformance:
    """Per-assignee accumulator; the rates are derived from the counters."""

    user_id: str
    user_name: str
    user_email: str
    role: str
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    overdue_tasks: int = 0
    total_points_earned: int = 0
    total_possible_points: int = 0
    total_bonus_points: int = 0
    on_time_submissions: int = 0
    late_submissions: int = 0
    quality_scores: list[int] = field(default_factory=list)

    @property
    def completion_rate(self) -> float:
        return pct(self.completed_tasks, self.total_tasks)

    @property
    def points_efficiency(self) -> float:
        return pct(self.total_points_earned, self.total_possible_points)

    @property
    def on_time_rate(self) -> float:
        return pct(self.on_time_submissions, self.on_time_submissions + self.late_submissions)

    @property
    def average_quality_score(self) -> float:
        if not self.quality_scores:
            return 0.0
        return round(sum(self.quality_scores) / len(self.quality_scores), 2)

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "role": self.role,
            "totalTasks": self.total_tasks,
            "completedTasks": self.completed_tasks,
            "pendingTasks": self.pending_tasks,
            "overdueTasks": self.overdue_tasks,
            "totalPointsEarned": self.total_points_earned,
            "totalPossiblePoints": self.total_possible_points,
            "totalBonusPoints": self.total_bonus_points,
            "onTimeSubmissions": self.on_time_submissions,
            "lateSubmissions": self.late_submissions,
            "averageQualityScore": self.average_quality_score,
            "completionRate": self.completion_rate,
            "pointsEfficiency": self.points_efficiency,
            "onTimeRate": self.on_time_rate,
        }


@dataclass(frozen=True)
class WorkspacePerformance:
    total_users: int
    total_tasks: int
    total_completed_tasks: int
    total_points_earned: int
    average_completion_rate: float
    average_points_efficiency: float

    def to_dict(self) -> dict:
        return {
            "totalUsers": self.total_users,
            "totalTasks": self.total_tasks,
            "totalCompletedTasks": self.total_completed_tasks,
            "totalPointsEarned": self.total_points_earned,
            "averageCompletionRate": self.average_completion_rate,
            "averagePointsEfficiency": self.average_points_efficiency,
        }


@dataclass(frozen=True)
class PerformanceReport:
    users: list[UserPerformance]
    workspace: WorkspacePerformance
    period: PerformancePeriod
    user_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "users": [u.to_dict() for u in self.users],
            "workspaceStats": self.workspace.to_dict(),
            "period": self.period.value,
        }
