from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..database.row_mappers import row_to_identity
from .model import UserIdentity
from .repository import IdentityRepository


class MySQLIdentityRepository(IdentityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_in_workspace(self, user_id: str, workspace_id: str) -> Optional[UserIdentity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, role, workspace_id, reporting_manager_id, is_active
                FROM users
                WHERE user_id=%s AND workspace_id=%s AND is_active=1
                """,
                (user_id, workspace_id),
            )
            row = fetchone(cur)
            if not row:
                return None
            return row_to_identity(row)
