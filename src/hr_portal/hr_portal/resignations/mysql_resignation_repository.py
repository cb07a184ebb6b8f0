from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..core.enums import ExitProcedure, ProcedureStatus, ResignationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import ExitProcedureItem, Resignation
from .repository import ResignationRepository

_SELECT = """
    SELECT r.resignation_id, r.employee_id, r.resignation_date, r.last_working_date, r.reason,
           r.status, r.approved_by, r.approval_date, r.approval_remarks, r.created_at,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name, e.employee_code
    FROM resignations r
    JOIN employees e ON e.employee_id = r.employee_id
"""


class MySQLResignationRepository(ResignationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, where: str, params: tuple) -> list[Resignation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY r.created_at DESC, r.resignation_id DESC", params)
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["resignation_id"]) for r in rows]
            cur.execute(
                f"""
                SELECT resignation_id, procedure_type, status, completed_by, completed_at, remarks
                FROM resignation_procedures WHERE resignation_id IN ({in_clause(ids)})
                """,
                tuple(ids),
            )
            procedures = defaultdict(list)
            for p in fetchall(cur):
                procedures[int(p["resignation_id"])].append(
                    ExitProcedureItem(
                        procedure_type=ExitProcedure(p["procedure_type"]),
                        status=ProcedureStatus(p["status"]),
                        completed_by=p.get("completed_by"),
                        completed_at=p.get("completed_at"),
                        remarks=p.get("remarks"),
                    )
                )

        return [
            Resignation(
                resignation_id=int(r["resignation_id"]),
                employee_id=int(r["employee_id"]),
                resignation_date=r["resignation_date"],
                last_working_date=r["last_working_date"],
                reason=r["reason"],
                status=ResignationStatus(r["status"]),
                approved_by=r.get("approved_by"),
                approval_date=r.get("approval_date"),
                approval_remarks=r.get("approval_remarks"),
                created_at=r.get("created_at"),
                procedures=tuple(procedures[int(r["resignation_id"])]),
                employee_name=r.get("employee_name"),
                employee_code=r.get("employee_code"),
            )
            for r in rows
        ]

    def get_by_id(self, resignation_id: int) -> Optional[Resignation]:
        found = self._load("r.resignation_id=%s", (int(resignation_id),))
        return found[0] if found else None

    def list_resignations(self, *, employee_id=None) -> Sequence[Resignation]:
        if employee_id is None:
            return self._load("1=1", ())
        return self._load("r.employee_id=%s", (int(employee_id),))

    def find_open(self, employee_id: int) -> Optional[Resignation]:
        found = self._load(
            "r.employee_id=%s AND r.status IN (%s, %s)",
            (int(employee_id), ResignationStatus.PENDING.value, ResignationStatus.APPROVED.value),
        )
        return found[0] if found else None

    def create(self, *, employee_id, resignation_date, last_working_date, reason) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO resignations (employee_id, resignation_date, last_working_date, reason, status)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (int(employee_id), resignation_date, last_working_date, reason, ResignationStatus.PENDING.value),
            )
            resignation_id = int(cur.lastrowid)
            for kind in ExitProcedure:
                cur.execute(
                    "INSERT INTO resignation_procedures (resignation_id, procedure_type, status) VALUES (%s, %s, %s)",
                    (resignation_id, kind.value, ProcedureStatus.PENDING.value),
                )
            return resignation_id

    def decide(self, resignation_id, *, status, approved_by, remarks) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE resignations
                SET status=%s, approved_by=%s, approval_date=NOW(), approval_remarks=%s
                WHERE resignation_id=%s AND status=%s
                """,
                (status.value, int(approved_by), remarks, int(resignation_id), ResignationStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def set_status(self, resignation_id, *, status) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE resignations SET status=%s WHERE resignation_id=%s", (status.value, int(resignation_id)))
            return cur.rowcount > 0

    def update_procedure(self, resignation_id, *, procedure, status, completed_by, remarks) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO resignation_procedures (resignation_id, procedure_type, status, completed_by, completed_at, remarks)
                VALUES (%s, %s, %s, %s, NOW(), %s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), completed_by=VALUES(completed_by),
                                        completed_at=VALUES(completed_at), remarks=VALUES(remarks)
                """,
                (int(resignation_id), procedure.value, status.value, int(completed_by), remarks),
            )
            return cur.rowcount > 0

    def update_last_working_date(self, resignation_id, *, last_working_date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE resignations SET last_working_date=%s WHERE resignation_id=%s",
                (last_working_date, int(resignation_id)),
            )
            return cur.rowcount > 0
