from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.datetime_utils import now_utc
from ..common.responses import json_body, ok
from ..common.session import current_role, current_user_id, current_workspace_id, login_required
from ..common.validators import parse_enum
from ..core.enums import Role, TaskPriority, TaskStatus, TaskView
from ..container import Container
from ..tasks.model import TaskFilter

# JSON field -> service keyword for the editable task fields
UPDATE_FIELDS = {
    "title": "title",
    "description": "description",
    "objectives": "objectives",
    "startDate": "start_date",
    "endDate": "end_date",
    "dueAt": "due_at",
    "assignedTo": "assigned_to",
    "priority": "priority",
    "status": "status",
}


def _query(name: str) -> Optional[str]:
    value = (request.args.get(name) or "").strip()
    if not value or value == "all":
        return None
    return value


def register(app: Flask, container: Container) -> None:
    tasks = container.task_service

    @app.route("/api/tasks", methods=["GET"], endpoint="list_tasks")
    @login_required
    def list_tasks():
        status = _query("status")
        priority = _query("priority")
        assigned_role = _query("assignedRole")
        filters = TaskFilter(
            workspace_id=current_workspace_id(),
            search=_query("search"),
            status=parse_enum(TaskStatus, status, "status") if status else None,
            priority=parse_enum(TaskPriority, priority, "priority") if priority else None,
            assigned_to=_query("assignedTo"),
            created_by=_query("createdBy"),
            assigned_role=parse_enum(Role, assigned_role, "role") if assigned_role else None,
            view=parse_enum(TaskView, request.args.get("view") or "all", "view"),
            current_user_id=current_user_id(),
        )
        return ok(tasks.list_tasks(filters))

    @app.route("/api/tasks", methods=["POST"], endpoint="create_task")
    @login_required
    def create_task():
        body = json_body()
        task = tasks.create_task(
            workspace_id=current_workspace_id(),
            creator_id=current_user_id(),
            creator_role=current_role(),
            title=body.get("title"),
            start_date=body.get("startDate"),
            assigned_to=body.get("assignedTo"),
            description=body.get("description"),
            objectives=body.get("objectives"),
            end_date=body.get("endDate"),
            due_at=body.get("dueAt"),
            priority=body.get("priority"),
        )
        return ok(task.to_dict(), 201)

    @app.route("/api/tasks/assigned", methods=["GET"], endpoint="assigned_tasks")
    @login_required
    def assigned_tasks():
        user_id = request.args.get("userId") or current_user_id()
        return ok(tasks.list_assigned(user_id=user_id, workspace_id=current_workspace_id()))

    @app.route("/api/tasks/stats", methods=["GET"], endpoint="task_stats")
    @login_required
    def task_stats():
        return ok(tasks.task_stats(current_workspace_id()).to_dict())

    @app.route("/api/tasks/<task_id>", methods=["GET"], endpoint="get_task")
    @login_required
    def get_task(task_id: str):
        return ok(tasks.get_task(task_id, workspace_id=current_workspace_id()).to_dict(now=now_utc()))

    @app.route("/api/tasks/<task_id>", methods=["PUT"], endpoint="update_task")
    @login_required
    def update_task(task_id: str):
        body = json_body()
        changes = {UPDATE_FIELDS[k]: v for k, v in body.items() if k in UPDATE_FIELDS}
        task = tasks.update_task(task_id, changes, workspace_id=current_workspace_id())
        return ok(task.to_dict())

    @app.route("/api/tasks/<task_id>", methods=["DELETE"], endpoint="delete_task")
    @login_required
    def delete_task(task_id: str):
        tasks.delete_task(task_id, workspace_id=current_workspace_id())
        return ok(None, message="Task deleted successfully")

    @app.route("/api/tasks/<task_id>/status", methods=["PATCH"], endpoint="set_task_status")
    @login_required
    def set_task_status(task_id: str):
        body = json_body()
        task = tasks.set_status(task_id, body.get("status"), workspace_id=current_workspace_id())
        return ok(task.to_dict())
