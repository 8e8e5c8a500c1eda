"""Column lists and row -> entity mappers shared by the MySQL repositories.

Joined queries alias user columns with ``a_`` (assignee) and submission
columns with ``s_`` so one dict row can carry all three entities.
"""
from __future__ import annotations

from typing import Optional

from ..core.enums import Role, SubmissionStatus, TaskPriority, TaskStatus
from ..submissions.model import TaskSubmission
from ..tasks.model import Task
from ..users.model import UserIdentity
from .mysql_base import from_db_datetime

TASK_COLUMNS = """
    t.task_id, t.title, t.description, t.objectives, t.priority, t.status,
    t.start_date, t.end_date, t.due_at,
    t.assigned_to, t.assigned_by, t.assigned_role, t.created_by, t.created_role,
    t.created_at, t.updated_at
"""

ASSIGNEE_COLUMNS = """
    a.user_id AS a_user_id, a.full_name AS a_full_name, a.email AS a_email, a.role AS a_role,
    a.workspace_id AS a_workspace_id, a.reporting_manager_id AS a_reporting_manager_id,
    a.is_active AS a_is_active
"""

SUBMISSION_COLUMNS = """
    s.submission_id AS s_submission_id, s.task_id AS s_task_id, s.user_id AS s_user_id,
    s.report AS s_report, s.file_url AS s_file_url, s.submitted_at AS s_submitted_at,
    s.status AS s_status, s.base_points AS s_base_points, s.quality_points AS s_quality_points,
    s.bonus_points AS s_bonus_points, s.remarks AS s_remarks,
    s.reviewed_by AS s_reviewed_by, s.reviewed_at AS s_reviewed_at
"""


def row_to_identity(row: dict, prefix: str = "") -> Optional[UserIdentity]:
    if not row.get(f"{prefix}user_id"):
        return None
    return UserIdentity(
        user_id=str(row[f"{prefix}user_id"]),
        full_name=row[f"{prefix}full_name"],
        email=row.get(f"{prefix}email") or "",
        role=Role(row[f"{prefix}role"]),
        workspace_id=row.get(f"{prefix}workspace_id"),
        manager_id=row.get(f"{prefix}reporting_manager_id"),
        is_active=bool(row.get(f"{prefix}is_active", True)),
    )


def row_to_task(row: dict) -> Task:
    return Task(
        task_id=str(row["task_id"]),
        title=row["title"],
        description=row.get("description"),
        objectives=row.get("objectives"),
        priority=TaskPriority(row["priority"]),
        status=TaskStatus(row["status"]),
        start_date=from_db_datetime(row["start_date"]),
        end_date=from_db_datetime(row.get("end_date")),
        due_at=from_db_datetime(row.get("due_at")),
        assigned_to=str(row["assigned_to"]),
        assigned_by=str(row["assigned_by"]),
        assigned_role=Role(row["assigned_role"]),
        created_by=str(row["created_by"]),
        created_role=Role(row["created_role"]),
        created_at=from_db_datetime(row["created_at"]),
        updated_at=from_db_datetime(row.get("updated_at")),
    )


def row_to_submission(row: dict, prefix: str = "s_") -> Optional[TaskSubmission]:
    if not row.get(f"{prefix}submission_id"):
        return None
    return TaskSubmission(
        submission_id=str(row[f"{prefix}submission_id"]),
        task_id=str(row[f"{prefix}task_id"]),
        user_id=str(row[f"{prefix}user_id"]),
        report=row[f"{prefix}report"],
        file_url=row.get(f"{prefix}file_url"),
        submitted_at=from_db_datetime(row[f"{prefix}submitted_at"]),
        status=SubmissionStatus(row[f"{prefix}status"]),
        base_points=int(row.get(f"{prefix}base_points") or 0),
        quality_points=int(row.get(f"{prefix}quality_points") or 0),
        bonus_points=int(row.get(f"{prefix}bonus_points") or 0),
        remarks=row.get(f"{prefix}remarks"),
        reviewed_by=row.get(f"{prefix}reviewed_by"),
        reviewed_at=from_db_datetime(row.get(f"{prefix}reviewed_at")),
    )
