from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Payslip
from .repository import PayslipRepository

_SELECT = """
    SELECT p.payslip_id, p.employee_id, p.month, p.year, p.file_name, p.file_path, p.file_size,
           p.uploaded_by, p.uploaded_at, p.remarks,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name, e.employee_code
    FROM payslips p
    JOIN employees e ON e.employee_id = p.employee_id
"""


def _row_to_payslip(r: dict) -> Payslip:
    return Payslip(
        payslip_id=int(r["payslip_id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        file_name=r["file_name"],
        file_path=r["file_path"],
        file_size=int(r.get("file_size") or 0),
        uploaded_by=r.get("uploaded_by"),
        uploaded_at=r.get("uploaded_at"),
        remarks=r.get("remarks"),
        employee_name=r.get("employee_name"),
        employee_code=r.get("employee_code"),
    )


class MySQLPayslipRepository(PayslipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payslip_id: int) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE p.payslip_id=%s", (int(payslip_id),))
            row = fetchone(cur)
            return _row_to_payslip(row) if row else None

    def list_payslips(self, *, employee_id=None, month=None, year=None) -> Sequence[Payslip]:
        where = ["1=1"]
        params: list = []
        if employee_id is not None:
            where.append("p.employee_id=%s")
            params.append(int(employee_id))
        if month is not None:
            where.append("p.month=%s")
            params.append(int(month))
        if year is not None:
            where.append("p.year=%s")
            params.append(int(year))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {' AND '.join(where)} ORDER BY p.year DESC, p.month DESC, p.payslip_id DESC",
                tuple(params),
            )
            return [_row_to_payslip(r) for r in fetchall(cur)]

    def upsert(self, *, employee_id, month, year, file_name, file_path, file_size, uploaded_by, remarks) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payslips (employee_id, month, year, file_name, file_path, file_size, uploaded_by, uploaded_at, remarks)
                VALUES (%s, %s, %s, %s, %s, %s, %s, NOW(), %s)
                ON DUPLICATE KEY UPDATE
                    payslip_id=LAST_INSERT_ID(payslip_id),
                    file_name=VALUES(file_name), file_path=VALUES(file_path), file_size=VALUES(file_size),
                    uploaded_by=VALUES(uploaded_by), uploaded_at=VALUES(uploaded_at), remarks=VALUES(remarks)
                """,
                (int(employee_id), int(month), int(year), file_name, file_path, int(file_size), int(uploaded_by), remarks),
            )
            return int(cur.lastrowid)
