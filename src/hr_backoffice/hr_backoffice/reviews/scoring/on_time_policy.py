from __future__ import annotations

from ...core.constants import ON_TIME_BASE_POINTS
from ...submissions.model import TaskSubmission
from ...tasks.model import Task
from .base import ScoringPolicy


def is_on_time(task: Task, submission: TaskSubmission) -> bool:
    """On time means the task has a deadline and the work arrived no later than it."""
    return task.due_at is not None and submission.submitted_at <= task.due_at


class OnTimeScoringPolicy(ScoringPolicy):
    """Standard rule: 5 points when submitted on or before due_at, else 0."""

    def __init__(self, points: int = ON_TIME_BASE_POINTS):
        self._points = int(points)

    def base_points(self, task: Task, submission: TaskSubmission) -> int:
        return self._points if is_on_time(task, submission) else 0
