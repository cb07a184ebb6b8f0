from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Leave
from .repository import LeaveRepository

_SELECT = """
    SELECT l.leave_id, l.employee_id, l.leave_type, l.start_date, l.end_date, l.days,
           l.reason, l.status, l.approved_by, l.approval_date, l.remarks, l.created_at,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name,
           e.employee_code, e.management_level AS employee_level,
           CONCAT(a.first_name, ' ', a.last_name) AS approver_name
    FROM leaves l
    JOIN employees e ON e.employee_id = l.employee_id
    LEFT JOIN employees a ON a.employee_id = l.approved_by
"""


def _row_to_leave(r: dict) -> Leave:
    return Leave(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=float(r["days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        approved_by=r.get("approved_by"),
        approval_date=r.get("approval_date"),
        remarks=r.get("remarks"),
        created_at=r.get("created_at"),
        employee_name=r.get("employee_name"),
        employee_code=r.get("employee_code"),
        employee_level=r.get("employee_level"),
        approver_name=r.get("approver_name"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, employee_id, leave_type, start_date, end_date, days, reason) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves (employee_id, leave_type, start_date, end_date, days, reason, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (int(employee_id), leave_type.value, start_date, end_date, days, reason, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, leave_id: int) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE l.leave_id=%s", (int(leave_id),))
            row = fetchone(cur)
            return _row_to_leave(row) if row else None

    def list_leaves(self, *, employee_ids=None, status=None, limit=200) -> Sequence[Leave]:
        where = ["1=1"]
        params: list = []
        if employee_ids is not None:
            ids = [int(i) for i in employee_ids]
            if not ids:
                return []
            where.append(f"l.employee_id IN ({in_clause(ids)})")
            params.extend(ids)
        if status is not None:
            where.append("l.status=%s")
            params.append(status.value)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {' AND '.join(where)} ORDER BY l.created_at DESC, l.leave_id DESC LIMIT %s",
                tuple(params),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def decide(self, leave_id: int, *, status: LeaveStatus, approved_by: int, remarks: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, approved_by=%s, approval_date=NOW(), remarks=%s
                WHERE leave_id=%s AND status=%s
                """,
                (status.value, int(approved_by), remarks, int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete_pending(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leaves WHERE leave_id=%s AND status=%s", (int(leave_id), LeaveStatus.PENDING.value))
            return cur.rowcount > 0
