from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_WORKSPACE_ID = "ws-demo"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_settings(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = DatabaseConnection(DBConfig.from_settings(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_settings(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def seed_demo_data(db_config: dict) -> None:
    """Demo workspace: one admin, two managers, employees split between them, a few tasks.

    Idempotent: rows are upserted by primary key.
    """

    now = datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)

    users = [
        ("u-admin", "Admin Demo", "admin@demo.local", "ADMIN", None),
        ("u-mgr-1", "Mai Manager", "mai@demo.local", "MANAGER", "u-admin"),
        ("u-mgr-2", "Minh Manager", "minh@demo.local", "MANAGER", "u-admin"),
        ("u-emp-1", "Lan Employee", "lan@demo.local", "EMPLOYEE", "u-mgr-1"),
        ("u-emp-2", "Hung Employee", "hung@demo.local", "EMPLOYEE", "u-mgr-1"),
        ("u-emp-3", "Thu Employee", "thu@demo.local", "EMPLOYEE", "u-mgr-2"),
    ]
    tasks = [
        ("t-demo-1", "Prepare onboarding checklist", "HIGH", "u-emp-1", "u-mgr-1", "MANAGER", now + timedelta(days=3)),
        ("t-demo-2", "Update leave policy draft", "MEDIUM", "u-emp-2", "u-mgr-1", "MANAGER", now - timedelta(days=1)),
        ("t-demo-3", "Audit payroll exports", "LOW", "u-emp-3", "u-admin", "ADMIN", None),
    ]

    conn = DatabaseConnection(DBConfig.from_settings(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute(
            "INSERT INTO workspaces(workspace_id, name) VALUES(%s,%s) ON DUPLICATE KEY UPDATE name=VALUES(name)",
            (DEMO_WORKSPACE_ID, "Demo Workspace"),
        )
        for user_id, full_name, email, role, manager_id in users:
            cur.execute(
                """
                INSERT INTO users(user_id, workspace_id, full_name, email, role, reporting_manager_id, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), role=VALUES(role),
                    reporting_manager_id=VALUES(reporting_manager_id), is_active=1
                """,
                (user_id, DEMO_WORKSPACE_ID, full_name, email, role, manager_id),
            )
        for task_id, title, priority, assignee, creator, creator_role, due_at in tasks:
            cur.execute(
                """
                INSERT INTO tasks(task_id, title, priority, status, start_date, due_at,
                                  assigned_to, assigned_by, assigned_role, created_by, created_role,
                                  created_at, updated_at)
                VALUES(%s,%s,%s,'OPEN',%s,%s,%s,%s,'EMPLOYEE',%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE title=VALUES(title)
                """,
                (task_id, title, priority, now, due_at, assignee, creator, creator, creator_role, now, now),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo data seeded into workspace %s", DEMO_WORKSPACE_ID)
