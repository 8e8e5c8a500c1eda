from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TaskStatus
from .model import Task, TaskDetail, TaskFilter


class TaskRepository(Protocol):
    def create_task(self, task: Task) -> str:
        raise NotImplementedError

    def get_by_id(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    def get_detail(self, task_id: str) -> Optional[TaskDetail]:
        """Task joined with assignee and submission."""

        raise NotImplementedError

    def update_fields(self, *, task_id: str, changes: dict, updated_at: datetime) -> bool:
        raise NotImplementedError

    def update_status(
        self,
        *,
        task_id: str,
        status: TaskStatus,
        updated_at: datetime,
        expected: Optional[TaskStatus] = None,
    ) -> bool:
        """Write the status; when ``expected`` is given only if the row still has it."""

        raise NotImplementedError

    def delete_with_submission(self, task_id: str) -> bool:
        """Delete the task and its submission in a single transaction."""

        raise NotImplementedError

    def list_details(self, filters: TaskFilter) -> Sequence[TaskDetail]:
        """Newest first."""

        raise NotImplementedError

    def list_for_workspace(
        self,
        *,
        workspace_id: str,
        created_since: Optional[datetime] = None,
        assigned_to: Optional[str] = None,
    ) -> Sequence[TaskDetail]:
        """Tasks whose assignee belongs to the workspace (stats/performance)."""

        raise NotImplementedError
