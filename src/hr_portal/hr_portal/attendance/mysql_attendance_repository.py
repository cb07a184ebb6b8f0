from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceSource, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.attendance_id, a.employee_id, a.work_date, a.check_in, a.check_out,
           a.status, a.source, a.working_hours, a.notes,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name,
           e.employee_code, d.name AS department_name
    FROM attendance a
    JOIN employees e ON e.employee_id = a.employee_id
    LEFT JOIN departments d ON d.department_id = e.department_id
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        status=AttendanceStatus(r["status"]),
        source=AttendanceSource(r.get("source") or AttendanceSource.MANUAL.value),
        working_hours=float(r.get("working_hours") or 0),
        notes=r.get("notes"),
        employee_name=r.get("employee_name"),
        employee_code=r.get("employee_code"),
        department_name=r.get("department_name"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE a.attendance_id=%s", (int(attendance_id),))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE a.employee_id=%s AND a.work_date=%s", (int(employee_id), work_date))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def list_records(self, *, employee_ids=None, start_date=None, end_date=None, limit=None) -> Sequence[AttendanceRecord]:
        where = ["1=1"]
        params: list = []
        if employee_ids is not None:
            ids = [int(i) for i in employee_ids]
            if not ids:
                return []
            where.append(f"a.employee_id IN ({in_clause(ids)})")
            params.extend(ids)
        if start_date:
            where.append("a.work_date >= %s")
            params.append(start_date)
        if end_date:
            where.append("a.work_date <= %s")
            params.append(end_date)

        sql = f"{_SELECT} WHERE {' AND '.join(where)} ORDER BY a.work_date DESC, employee_name"
        if limit:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_record(r) for r in fetchall(cur)]

    def create_checkin(self, *, employee_id: int, work_date: date, check_in: datetime, status: AttendanceStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance (employee_id, work_date, check_in, status, source)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (int(employee_id), work_date, check_in, status.value, AttendanceSource.MANUAL.value),
            )
            return int(cur.lastrowid)

    def complete_checkin(self, *, attendance_id: int, check_in: datetime, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_in=%s, status=%s, source=%s
                WHERE attendance_id=%s AND check_in IS NULL
                """,
                (check_in, status.value, AttendanceSource.MANUAL.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_checkout(self, *, attendance_id, check_out, status, working_hours, notes=None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out=%s, status=%s, working_hours=%s, notes=COALESCE(%s, notes)
                WHERE attendance_id=%s AND check_out IS NULL
                """,
                (check_out, status.value, working_hours, notes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_record(self, *, attendance_id, check_in, check_out, status, working_hours, notes=None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_in=%s, check_out=%s, status=%s, working_hours=%s, notes=%s
                WHERE attendance_id=%s
                """,
                (check_in, check_out, status.value, working_hours, notes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def upsert_day(self, *, employee_id, work_date, status, source, notes=None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance (employee_id, work_date, status, source, notes)
                VALUES (%s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), source=VALUES(source), notes=VALUES(notes)
                """,
                (int(employee_id), work_date, status.value, source.value, notes),
            )
