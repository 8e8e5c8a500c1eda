from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import SubmissionStatus
from ..core.exceptions import InvalidStateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, to_db_datetime
from ..database.row_mappers import (
    ASSIGNEE_COLUMNS,
    SUBMISSION_COLUMNS,
    TASK_COLUMNS,
    row_to_identity,
    row_to_submission,
    row_to_task,
)
from .model import ReviewItem, TaskSubmission
from .repository import SubmissionRepository

REVIEW_ITEM_SELECT = f"""
    SELECT {SUBMISSION_COLUMNS}, {TASK_COLUMNS}, {ASSIGNEE_COLUMNS}
    FROM task_submissions s
    JOIN tasks t ON t.task_id = s.task_id
    JOIN users a ON a.user_id = t.assigned_to
"""


def _row_to_review_item(row: dict) -> ReviewItem:
    return ReviewItem(
        submission=row_to_submission(row),
        task=row_to_task(row),
        assignee=row_to_identity(row, prefix="a_"),
    )


class MySQLSubmissionRepository(SubmissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_submission(self, submission: TaskSubmission) -> str:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO task_submissions(
                        submission_id, task_id, user_id, report, file_url, submitted_at,
                        status, base_points, quality_points, bonus_points
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        submission.submission_id,
                        submission.task_id,
                        submission.user_id,
                        submission.report,
                        submission.file_url,
                        to_db_datetime(submission.submitted_at),
                        submission.status.value,
                        submission.base_points,
                        submission.quality_points,
                        submission.bonus_points,
                    ),
                )
                return submission.submission_id
        except Exception as exc:
            # a concurrent submit won the race on uq_task_submissions_task
            if is_duplicate_key(exc):
                raise InvalidStateError("Task already submitted") from exc
            raise

    def get_by_id(self, submission_id: str) -> Optional[TaskSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {SUBMISSION_COLUMNS} FROM task_submissions s WHERE s.submission_id=%s", (submission_id,))
            row = fetchone(cur)
            return row_to_submission(row) if row else None

    def get_by_task(self, task_id: str) -> Optional[TaskSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {SUBMISSION_COLUMNS} FROM task_submissions s WHERE s.task_id=%s", (task_id,))
            row = fetchone(cur)
            return row_to_submission(row) if row else None

    def get_review_item(self, submission_id: str) -> Optional[ReviewItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{REVIEW_ITEM_SELECT} WHERE s.submission_id=%s", (submission_id,))
            row = fetchone(cur)
            return _row_to_review_item(row) if row else None

    def decide(
        self,
        *,
        submission_id: str,
        status: SubmissionStatus,
        base_points: int,
        quality_points: int,
        bonus_points: int,
        remarks: Optional[str],
        reviewed_by: str,
        reviewed_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE task_submissions
                SET status=%s, base_points=%s, quality_points=%s, bonus_points=%s,
                    remarks=%s, reviewed_by=%s, reviewed_at=%s
                WHERE submission_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(base_points),
                    int(quality_points),
                    int(bonus_points),
                    remarks,
                    reviewed_by,
                    to_db_datetime(reviewed_at),
                    submission_id,
                    SubmissionStatus.PENDING_REVIEW.value,
                ),
            )
            return cur.rowcount > 0

    def list_pending_for_workspace(self, workspace_id: str) -> Sequence[ReviewItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{REVIEW_ITEM_SELECT} WHERE s.status=%s AND a.workspace_id=%s ORDER BY s.submitted_at ASC",
                (SubmissionStatus.PENDING_REVIEW.value, workspace_id),
            )
            return [_row_to_review_item(r) for r in fetchall(cur)]

    def list_reviewed_for_user(self, user_id: str, *, limit: int) -> Sequence[ReviewItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {REVIEW_ITEM_SELECT}
                WHERE s.user_id=%s AND s.status IN (%s, %s)
                ORDER BY s.submitted_at DESC
                LIMIT %s
                """,
                (user_id, SubmissionStatus.APPROVED.value, SubmissionStatus.REJECTED.value, int(limit)),
            )
            return [_row_to_review_item(r) for r in fetchall(cur)]
