from __future__ import annotations

from abc import ABC, abstractmethod

from ...submissions.model import TaskSubmission
from ...tasks.model import Task


class ScoringPolicy(ABC):
    """Scoring interface (Strategy Pattern for base points)."""

    @abstractmethod
    def base_points(self, task: Task, submission: TaskSubmission) -> int:
        raise NotImplementedError
