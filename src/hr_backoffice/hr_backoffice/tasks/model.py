from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Role, TaskPriority, TaskStatus, TaskView
from ..submissions.model import TaskSubmission
from ..users.model import UserIdentity


@dataclass(frozen=True)
class Task:
    """Domain entity: Task.

    assigned_role / created_role are snapshots taken at creation time and are
    never refreshed from the identity store.
    """

    task_id: str
    title: str
    description: Optional[str]
    objectives: Optional[str]
    priority: TaskPriority
    status: TaskStatus
    start_date: datetime
    end_date: Optional[datetime]
    due_at: Optional[datetime]
    assigned_to: str
    assigned_by: str
    assigned_role: Role
    created_by: str
    created_role: Role
    created_at: datetime
    updated_at: Optional[datetime] = None

    def is_overdue(self, now: datetime) -> bool:
        return self.due_at is not None and self.due_at < now and self.status != TaskStatus.DONE

    def to_dict(self) -> dict:
        return {
            "id": self.task_id,
            "title": self.title,
            "description": self.description,
            "objectives": self.objectives,
            "priority": self.priority.value,
            "status": self.status.value,
            "startDate": isoformat(self.start_date),
            "endDate": isoformat(self.end_date),
            "dueAt": isoformat(self.due_at),
            "assignedTo": self.assigned_to,
            "assignedBy": self.assigned_by,
            "assignedRole": self.assigned_role.value,
            "createdBy": self.created_by,
            "createdRole": self.created_role.value,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


@dataclass(frozen=True)
class TaskDetail:
    task: Task
    assignee: Optional[UserIdentity] = None
    submission: Optional[TaskSubmission] = None

    def to_dict(self, *, now: datetime) -> dict:
        data = self.task.to_dict()
        data["isOverdue"] = self.task.is_overdue(now)
        data["assignee"] = (
            {
                "id": self.assignee.user_id,
                "name": self.assignee.full_name,
                "email": self.assignee.email,
                "role": self.assignee.role.value,
            }
            if self.assignee
            else None
        )
        data["submission"] = self.submission.to_dict() if self.submission else None
        return data


@dataclass(frozen=True)
class TaskFilter:
    workspace_id: str
    search: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[str] = None
    created_by: Optional[str] = None
    assigned_role: Optional[Role] = None
    view: TaskView = TaskView.ALL
    current_user_id: Optional[str] = None
    limit: int = DEFAULT_LIST_LIMIT


@dataclass(frozen=True)
class TaskStats:
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    in_progress_tasks: int
    overdue_tasks: int

    def to_dict(self) -> dict:
        return {
            "totalTasks": self.total_tasks,
            "completedTasks": self.completed_tasks,
            "pendingTasks": self.pending_tasks,
            "inProgressTasks": self.in_progress_tasks,
            "overdueTasks": self.overdue_tasks,
        }
