from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc, parse_iso_datetime
from ..common.validators import optional_text, parse_enum, require_non_empty
from ..core.enums import Role, TaskPriority, TaskStatus
from ..core.exceptions import AuthorizationError, InvalidStateError, NotFoundError, ValidationError
from ..users.service import IdentityService
from .model import Task, TaskDetail, TaskFilter, TaskStats
from .repository import TaskRepository
from .transitions import allowed_targets, manual_event_for, next_status

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "objectives", "start_date", "end_date", "due_at", "assigned_to", "priority")


class TaskService:
    """Use cases of the task registry: create, edit, move through statuses, list."""

    def __init__(self, tasks: TaskRepository, identity: IdentityService):
        self._tasks = tasks
        self._identity = identity

    def create_task(
        self,
        *,
        workspace_id: str,
        creator_id: str,
        creator_role: Optional[Role],
        title: Optional[str],
        start_date,
        assigned_to: Optional[str],
        description: Optional[str] = None,
        objectives: Optional[str] = None,
        end_date=None,
        due_at=None,
        priority=None,
        now: Optional[datetime] = None,
    ) -> Task:
        if not title or not start_date or not assigned_to or not workspace_id or not creator_id or not creator_role:
            raise ValidationError(
                "Title, start date, assignee, workspace ID, and current user info are required"
            )

        title = require_non_empty(title, "Title")
        start = parse_iso_datetime(start_date, "Start date")
        end = parse_iso_datetime(end_date, "End date")
        due = parse_iso_datetime(due_at, "Due date")
        if end and end < start:
            raise ValidationError("End date must be on or after the start date")
        prio = parse_enum(TaskPriority, priority, "priority") if priority else TaskPriority.MEDIUM
        claimed_role = parse_enum(Role, creator_role, "role")

        assignee = self._identity.resolve_user(assigned_to, workspace_id, label="Assignee")
        creator = self._identity.resolve_actor(creator_id, workspace_id, claimed_role=claimed_role, label="Creator")

        if creator.role == Role.EMPLOYEE and assignee.role != Role.EMPLOYEE:
            raise AuthorizationError("Employees can only create tasks for other employees")

        now = now or now_utc()
        task = Task(
            task_id=uuid.uuid4().hex,
            title=title,
            description=optional_text(description),
            objectives=optional_text(objectives),
            priority=prio,
            status=TaskStatus.OPEN,
            start_date=start,
            end_date=end,
            due_at=due,
            assigned_to=assignee.user_id,
            assigned_by=creator.user_id,
            assigned_role=assignee.role,
            created_by=creator.user_id,
            created_role=creator.role,
            created_at=now,
            updated_at=now,
        )
        self._tasks.create_task(task)
        logger.info("Task %s created by %s (%s) for %s", task.task_id, creator.user_id, creator.role.value, assignee.user_id)
        return task

    def _task_in_workspace(self, task_id: str, workspace_id: Optional[str]) -> TaskDetail:
        """A task resolves only for callers of its assignee's workspace."""
        detail = self._tasks.get_detail(task_id)
        if not detail or not detail.assignee or detail.assignee.workspace_id != workspace_id:
            raise NotFoundError("Task not found")
        return detail

    def get_task(self, task_id: str, *, workspace_id: str) -> TaskDetail:
        return self._task_in_workspace(task_id, workspace_id)

    def update_task(self, task_id: str, changes: dict, *, workspace_id: str, now: Optional[datetime] = None) -> Task:
        self._task_in_workspace(task_id, workspace_id)
        if "status" in changes:
            raise ValidationError("Task status can only be changed through the status endpoint")

        clean: dict = {}
        for key in EDITABLE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if key == "title":
                clean[key] = require_non_empty(value, "Title")
            elif key in ("description", "objectives"):
                clean[key] = optional_text(value)
            elif key == "start_date":
                start = parse_iso_datetime(value, "Start date")
                if start is None:
                    raise ValidationError("Start date is required")
                clean[key] = start
            elif key in ("end_date", "due_at"):
                clean[key] = parse_iso_datetime(value, key.replace("_", " ").capitalize())
            elif key == "priority":
                clean[key] = parse_enum(TaskPriority, value, "priority")
            elif key == "assigned_to":
                clean[key] = self._identity.resolve_user(value, workspace_id, label="Assignee").user_id

        self._tasks.update_fields(task_id=task_id, changes=clean, updated_at=now or now_utc())
        updated = self._tasks.get_by_id(task_id)
        if not updated:
            raise NotFoundError("Task not found")
        return updated

    def set_status(self, task_id: str, new_status, *, workspace_id: str, now: Optional[datetime] = None) -> Task:
        if not new_status:
            raise ValidationError("Status is required")
        target = parse_enum(TaskStatus, new_status, "status")

        task = self._task_in_workspace(task_id, workspace_id).task
        if task.status == target:
            return task

        event = manual_event_for(task.status, target)
        if event is None:
            allowed = ", ".join(s.value for s in allowed_targets(task.status)) or "none"
            raise InvalidStateError(
                f"Cannot change status from {task.status.value} to {target.value} (allowed: {allowed})"
            )
        target = next_status(task.status, event)

        if not self._tasks.update_status(task_id=task_id, status=target, updated_at=now or now_utc(), expected=task.status):
            raise InvalidStateError("Task status changed concurrently, reload and try again")
        logger.info("Task %s: %s --%s--> %s", task_id, task.status.value, event.value, target.value)
        return self._tasks.get_by_id(task_id) or task

    def delete_task(self, task_id: str, *, workspace_id: str) -> None:
        self._task_in_workspace(task_id, workspace_id)
        if not self._tasks.delete_with_submission(task_id):
            raise NotFoundError("Task not found")
        logger.info("Task %s deleted", task_id)

    def list_tasks(self, filters: TaskFilter, *, now: Optional[datetime] = None) -> list[dict]:
        if not filters.workspace_id:
            raise ValidationError("Workspace ID is required")
        now = now or now_utc()
        return [d.to_dict(now=now) for d in self._tasks.list_details(filters)]

    def list_assigned(self, *, user_id: str, workspace_id: str, now: Optional[datetime] = None) -> list[dict]:
        user = self._identity.resolve_user(user_id, workspace_id)
        now = now or now_utc()
        details = self._tasks.list_for_workspace(workspace_id=workspace_id, assigned_to=user.user_id)
        return [d.to_dict(now=now) for d in details]

    def task_stats(self, workspace_id: str, *, now: Optional[datetime] = None) -> TaskStats:
        if not workspace_id:
            raise ValidationError("Workspace ID is required")
        now = now or now_utc()
        tasks = [d.task for d in self._tasks.list_for_workspace(workspace_id=workspace_id)]
        return TaskStats(
            total_tasks=len(tasks),
            completed_tasks=sum(1 for t in tasks if t.status == TaskStatus.DONE),
            pending_tasks=sum(1 for t in tasks if t.status == TaskStatus.OPEN),
            in_progress_tasks=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
            overdue_tasks=sum(1 for t in tasks if t.is_overdue(now)),
        )
