from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import TaskStatus, TaskView
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_db_datetime
from ..database.row_mappers import (
    ASSIGNEE_COLUMNS,
    SUBMISSION_COLUMNS,
    TASK_COLUMNS,
    row_to_identity,
    row_to_submission,
    row_to_task,
)
from .model import Task, TaskDetail, TaskFilter
from .repository import TaskRepository

DETAIL_SELECT = f"""
    SELECT {TASK_COLUMNS}, {ASSIGNEE_COLUMNS}, {SUBMISSION_COLUMNS}
    FROM tasks t
    JOIN users a ON a.user_id = t.assigned_to
    LEFT JOIN users c ON c.user_id = t.created_by
    LEFT JOIN task_submissions s ON s.task_id = t.task_id
"""

# Columns the generic update path may touch. Status has its own path.
UPDATABLE_COLUMNS = ("title", "description", "objectives", "start_date", "end_date", "due_at", "assigned_to", "priority")


def _row_to_detail(row: dict) -> TaskDetail:
    return TaskDetail(
        task=row_to_task(row),
        assignee=row_to_identity(row, prefix="a_"),
        submission=row_to_submission(row),
    )


def _db_value(value):
    if isinstance(value, datetime):
        return to_db_datetime(value)
    return getattr(value, "value", value)


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_task(self, task: Task) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(
                    task_id, title, description, objectives, priority, status,
                    start_date, end_date, due_at,
                    assigned_to, assigned_by, assigned_role, created_by, created_role,
                    created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    task.task_id,
                    task.title,
                    task.description,
                    task.objectives,
                    task.priority.value,
                    task.status.value,
                    to_db_datetime(task.start_date),
                    to_db_datetime(task.end_date),
                    to_db_datetime(task.due_at),
                    task.assigned_to,
                    task.assigned_by,
                    task.assigned_role.value,
                    task.created_by,
                    task.created_role.value,
                    to_db_datetime(task.created_at),
                    to_db_datetime(task.updated_at or task.created_at),
                ),
            )
            return task.task_id

    def get_by_id(self, task_id: str) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {TASK_COLUMNS} FROM tasks t WHERE t.task_id=%s", (task_id,))
            row = fetchone(cur)
            return row_to_task(row) if row else None

    def get_detail(self, task_id: str) -> Optional[TaskDetail]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{DETAIL_SELECT} WHERE t.task_id=%s", (task_id,))
            row = fetchone(cur)
            return _row_to_detail(row) if row else None

    def update_fields(self, *, task_id: str, changes: dict, updated_at: datetime) -> bool:
        columns = [c for c in UPDATABLE_COLUMNS if c in changes]
        if not columns:
            return self.get_by_id(task_id) is not None

        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = [_db_value(changes[c]) for c in columns]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE tasks SET {assignments}, updated_at=%s WHERE task_id=%s",
                tuple(params + [to_db_datetime(updated_at), task_id]),
            )
            return cur.rowcount > 0

    def update_status(
        self,
        *,
        task_id: str,
        status: TaskStatus,
        updated_at: datetime,
        expected: Optional[TaskStatus] = None,
    ) -> bool:
        sql = "UPDATE tasks SET status=%s, updated_at=%s WHERE task_id=%s"
        params: list[object] = [status.value, to_db_datetime(updated_at), task_id]
        if expected is not None:
            sql += " AND status=%s"
            params.append(expected.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def delete_with_submission(self, task_id: str) -> bool:
        # one transaction: the submission never outlives a failed task delete
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM task_submissions WHERE task_id=%s", (task_id,))
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (task_id,))
            return cur.rowcount > 0

    def list_details(self, filters: TaskFilter) -> Sequence[TaskDetail]:
        clauses = ["(a.workspace_id=%s OR c.workspace_id=%s)"]
        params: list[object] = [filters.workspace_id, filters.workspace_id]

        if filters.view == TaskView.ASSIGNED and filters.current_user_id:
            clauses.append("t.assigned_to=%s")
            params.append(filters.current_user_id)
        elif filters.view == TaskView.CREATED and filters.current_user_id:
            clauses.append("t.created_by=%s")
            params.append(filters.current_user_id)

        if filters.search:
            clauses.append("LOWER(t.title) LIKE %s")
            params.append(f"%{filters.search.lower()}%")
        if filters.status is not None:
            clauses.append("t.status=%s")
            params.append(filters.status.value)
        if filters.priority is not None:
            clauses.append("t.priority=%s")
            params.append(filters.priority.value)
        if filters.assigned_to:
            clauses.append("t.assigned_to=%s")
            params.append(filters.assigned_to)
        if filters.created_by:
            clauses.append("t.created_by=%s")
            params.append(filters.created_by)
        if filters.assigned_role is not None:
            clauses.append("t.assigned_role=%s")
            params.append(filters.assigned_role.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{DETAIL_SELECT} WHERE {where} ORDER BY t.created_at DESC LIMIT %s",
                tuple(params + [int(filters.limit)]),
            )
            return [_row_to_detail(r) for r in fetchall(cur)]

    def list_for_workspace(
        self,
        *,
        workspace_id: str,
        created_since: Optional[datetime] = None,
        assigned_to: Optional[str] = None,
    ) -> Sequence[TaskDetail]:
        clauses = ["a.workspace_id=%s"]
        params: list[object] = [workspace_id]
        if created_since is not None:
            clauses.append("t.created_at>=%s")
            params.append(to_db_datetime(created_since))
        if assigned_to:
            clauses.append("t.assigned_to=%s")
            params.append(assigned_to)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{DETAIL_SELECT} WHERE {where} ORDER BY t.created_at DESC", tuple(params))
            return [_row_to_detail(r) for r in fetchall(cur)]
