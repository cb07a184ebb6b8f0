from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..core.enums import EmployeeStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import EDITABLE_FIELDS, Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.employee_id, e.employee_code, e.first_name, e.last_name, e.email, e.password_hash,
           e.role, e.management_level, e.department_id, d.name AS department_name,
           e.position, e.phone, e.reporting_manager_id, e.status, e.is_active,
           e.saturday_working, e.joining_date, e.created_at,
           e.gross_salary, e.bank_account_number, e.bank_name, e.ifsc_code,
           e.pan_card, e.aadhar_card, e.uan_number, e.pf_number, e.esi_number
    FROM employees e
    LEFT JOIN departments d ON d.department_id = e.department_id
"""

_INSERTABLE = ("employee_code", "password_hash") + EDITABLE_FIELDS


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_code=r["employee_code"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        management_level=int(r["management_level"] or 0),
        department_id=r.get("department_id"),
        department_name=r.get("department_name"),
        position=r.get("position"),
        phone=r.get("phone"),
        reporting_manager_id=r.get("reporting_manager_id"),
        status=EmployeeStatus(r["status"]),
        is_active=bool(r.get("is_active", True)),
        saturday_working=bool(r.get("saturday_working", False)),
        joining_date=r.get("joining_date"),
        created_at=r.get("created_at"),
        gross_salary=r.get("gross_salary"),
        bank_account_number=r.get("bank_account_number"),
        bank_name=r.get("bank_name"),
        ifsc_code=r.get("ifsc_code"),
        pan_card=r.get("pan_card"),
        aadhar_card=r.get("aadhar_card"),
        uan_number=r.get("uan_number"),
        pf_number=r.get("pf_number"),
        esi_number=r.get("esi_number"),
    )


def _db_value(value):
    if isinstance(value, (Role, EmployeeStatus)):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, where: str, params: tuple) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where}", params)
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def _many(self, where: str = "1=1", params: tuple = (), order: str = "e.first_name, e.last_name") -> list[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY {order}", params)
            return [_row_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._one("e.employee_id=%s", (int(employee_id),))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._one("e.email=%s", (email.strip().lower(),))

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return self._one("e.employee_code=%s", (employee_code.strip(),))

    def list_all(
        self,
        *,
        status: Optional[EmployeeStatus] = None,
        department_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Sequence[Employee]:
        where = ["1=1"]
        params: list = []
        if status is not None:
            where.append("e.status=%s")
            params.append(status.value)
        if department_id is not None:
            where.append("e.department_id=%s")
            params.append(int(department_id))
        if search:
            like = f"%{search.strip()}%"
            where.append("(e.first_name LIKE %s OR e.last_name LIKE %s OR e.email LIKE %s OR e.employee_code LIKE %s)")
            params.extend([like, like, like, like])
        return self._many(" AND ".join(where), tuple(params), order="e.created_at DESC")

    def list_direct_reports(self, manager_id: int, *, level: Optional[int] = None, active_only: bool = False) -> Sequence[Employee]:
        where = ["e.reporting_manager_id=%s"]
        params: list = [int(manager_id)]
        if level is not None:
            where.append("e.management_level=%s")
            params.append(int(level))
        if active_only:
            where.append("e.is_active=1")
        return self._many(" AND ".join(where), tuple(params))

    def list_peers(self, employee: Employee) -> Sequence[Employee]:
        if employee.reporting_manager_id is None:
            return self._many(
                "e.reporting_manager_id IS NULL AND e.management_level=%s AND e.employee_id<>%s",
                (employee.management_level, employee.employee_id),
            )
        return self._many(
            "e.reporting_manager_id=%s AND e.management_level=%s AND e.employee_id<>%s",
            (employee.reporting_manager_id, employee.management_level, employee.employee_id),
        )

    def create(self, *, fields: Mapping) -> int:
        cols = [c for c in _INSERTABLE if c in fields]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO employees({', '.join(cols)}) VALUES({in_clause(cols)})",
                tuple(_db_value(fields[c]) for c in cols),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, *, fields: Mapping) -> bool:
        cols = [c for c in EDITABLE_FIELDS + ("password_hash",) if c in fields]
        if not cols:
            return True
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE employee_id=%s",
                tuple(_db_value(fields[c]) for c in cols) + (int(employee_id),),
            )
            return cur.rowcount >= 0

    def set_status(self, employee_id: int, *, status: EmployeeStatus, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET status=%s, is_active=%s WHERE employee_id=%s",
                (status.value, int(is_active), int(employee_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def count_by_department(self, department_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees WHERE department_id=%s", (int(department_id),))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def stats(self) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS n FROM employees GROUP BY status")
            by_status = {r["status"]: int(r["n"]) for r in fetchall(cur)}
            cur.execute(
                """
                SELECT e.department_id, d.name AS department_name, COUNT(*) AS n
                FROM employees e
                LEFT JOIN departments d ON d.department_id = e.department_id
                GROUP BY e.department_id, d.name
                ORDER BY n DESC
                """
            )
            by_department = [
                {"department_id": r["department_id"], "department_name": r.get("department_name"), "count": int(r["n"])}
                for r in fetchall(cur)
            ]
            cur.execute("SELECT role, COUNT(*) AS n FROM employees GROUP BY role")
            by_role = {r["role"]: int(r["n"]) for r in fetchall(cur)}
        return {
            "total": sum(by_status.values()),
            "active": by_status.get(EmployeeStatus.ACTIVE.value, 0),
            "inactive": by_status.get(EmployeeStatus.INACTIVE.value, 0),
            "on_leave": by_status.get(EmployeeStatus.ON_LEAVE.value, 0),
            "by_department": by_department,
            "by_role": by_role,
        }
