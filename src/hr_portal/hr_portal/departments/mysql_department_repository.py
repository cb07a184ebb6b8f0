from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_list, fetchall, fetchone, load_json_list
from .model import Department
from .repository import DepartmentRepository

_SELECT = "SELECT department_id, name, description, positions, parent_department_id, is_active FROM departments"


def _row_to_department(r: dict) -> Department:
    return Department(
        department_id=int(r["department_id"]),
        name=r["name"],
        description=r.get("description"),
        positions=tuple(str(p) for p in load_json_list(r.get("positions"))),
        parent_department_id=r.get("parent_department_id"),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY name")
            return [_row_to_department(r) for r in fetchall(cur)]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE department_id=%s", (department_id,))
            row = fetchone(cur)
            return _row_to_department(row) if row else None

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE LOWER(name)=LOWER(%s)", (name,))
            row = fetchone(cur)
            return _row_to_department(row) if row else None

    def create(self, *, name, description, positions, parent_department_id) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO departments (name, description, positions, parent_department_id)
                VALUES (%s, %s, %s, %s)
                """,
                (name, description, dump_json_list(positions), parent_department_id),
            )
            return int(cur.lastrowid)

    def update(self, department_id, *, name, description, positions, parent_department_id, is_active) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE departments
                SET name=%s, description=%s, positions=%s, parent_department_id=%s, is_active=%s
                WHERE department_id=%s
                """,
                (name, description, dump_json_list(positions), parent_department_id, int(is_active), department_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE department_id=%s", (department_id,))
            return cur.rowcount > 0

    def employee_counts(self) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT department_id, COUNT(*) AS total
                FROM employees
                WHERE department_id IS NOT NULL AND is_active = 1
                GROUP BY department_id
                """
            )
            return {int(r["department_id"]): int(r["total"]) for r in fetchall(cur)}
