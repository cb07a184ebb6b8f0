from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must work regardless of the configured database name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside quotes; '--' line comments are dropped."""
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False
    in_comment = False

    for i, ch in enumerate(sql):
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            continue

        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "-" and not in_single and not in_double and sql[i : i + 2] == "--":
            in_comment = True
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


def _run_script(factory: DatabaseConnection, sql: str) -> None:
    conn = factory.connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(_strip_create_db_and_use(sql)):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: Mapping) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    _run_script(factory, Path(schema_path).read_text(encoding="utf-8"))
    logger.info("Applied schema from %s", schema_path)


def apply_seed_sql(db_config: Mapping, *, seed_path: str | Path) -> None:
    factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    _run_script(factory, Path(seed_path).read_text(encoding="utf-8"))
    logger.info("Applied seed data from %s", seed_path)


def ensure_demo_users(db_config: Mapping) -> None:
    """Create or reset the demo accounts (one per management level)."""
    factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    conn = factory.connect()
    try:
        cur = conn.cursor(dictionary=True)

        def dept_id(name: str) -> int:
            cur.execute("SELECT department_id FROM departments WHERE name=%s", (name,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing departments row for name={name}")
            return int(row["department_id"])

        def upsert(code: str, first: str, last: str, email: str, password: str, role: str, level: int, dept: int, manager_code):
            manager_id = None
            if manager_code:
                cur.execute("SELECT employee_id FROM employees WHERE employee_code=%s", (manager_code,))
                row = cur.fetchone()
                manager_id = int(row["employee_id"]) if row else None

            password_hash = generate_password_hash(password)
            cur.execute("SELECT employee_id FROM employees WHERE employee_code=%s", (code,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE employees
                    SET first_name=%s, last_name=%s, email=%s, password_hash=%s, role=%s,
                        management_level=%s, department_id=%s, reporting_manager_id=%s,
                        status='active', is_active=1
                    WHERE employee_code=%s
                    """,
                    (first, last, email, password_hash, role, level, dept, manager_id, code),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees (employee_code, first_name, last_name, email, password_hash, role,
                                           management_level, department_id, reporting_manager_id)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (code, first, last, email, password_hash, role, level, dept, manager_id),
                )

        management = dept_id("Management")
        engineering = dept_id("Engineering")
        finance = dept_id("Finance")
        hr = dept_id("Human Resources")

        upsert("EMP001", "Olivia", "Owner", "owner@example.com", "owner123", "admin", 4, management, None)
        upsert("EMP002", "Felix", "Finance", "finance@example.com", "finance123", "admin", 3, finance, "EMP001")
        upsert("EMP003", "Hana", "People", "hr@example.com", "people123", "hr", 3, hr, "EMP001")
        upsert("EMP004", "Sam", "Senior", "senior@example.com", "senior123", "employee", 2, engineering, "EMP001")
        upsert("EMP005", "Mia", "Manager", "manager@example.com", "manager123", "employee", 1, engineering, "EMP004")
        upsert("EMP006", "Eli", "Engineer", "engineer@example.com", "engineer123", "employee", 0, engineering, "EMP005")

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo accounts ready")


def list_tables(db_config: Mapping) -> list[str]:
    factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    conn = factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
