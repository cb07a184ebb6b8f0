from __future__ import annotations

from typing import Mapping, Optional

from ..core.enums import LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .balance import BALANCE_TYPES
from .model import LeaveBalance
from .repository import LeaveBalanceRepository

_COLUMNS = tuple(t.value for t in BALANCE_TYPES)


def _column(leave_type: LeaveType) -> str:
    if leave_type not in BALANCE_TYPES:
        raise ValueError(f"{leave_type.value} leave has no balance")
    return leave_type.value


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id, personal, sick, casual, balance_month FROM leave_balances WHERE employee_id=%s",
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LeaveBalance(
                employee_id=int(r["employee_id"]),
                personal=float(r["personal"]),
                sick=float(r["sick"]),
                casual=float(r["casual"]),
                month=r.get("balance_month"),
            )

    def credit_month(self, employee_id: int, *, month: str, allocation: Mapping[str, float]) -> None:
        # balance_month must be assigned last: the IF()s compare against the old value
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_balances (employee_id, personal, sick, casual, balance_month)
                VALUES (%s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    personal=IF(balance_month <=> VALUES(balance_month), personal, personal + VALUES(personal)),
                    sick=IF(balance_month <=> VALUES(balance_month), sick, sick + VALUES(sick)),
                    casual=IF(balance_month <=> VALUES(balance_month), casual, casual + VALUES(casual)),
                    balance_month=VALUES(balance_month)
                """,
                (
                    int(employee_id),
                    allocation.get("personal", 0),
                    allocation.get("sick", 0),
                    allocation.get("casual", 0),
                    month,
                ),
            )

    def adjust(self, employee_id: int, *, leave_type: LeaveType, delta: float) -> bool:
        col = _column(leave_type)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE leave_balances SET {col}={col} + %s WHERE employee_id=%s AND {col} + %s >= 0",
                (delta, int(employee_id), delta),
            )
            return cur.rowcount > 0

    def set_values(self, employee_id: int, *, values: Mapping[str, float]) -> bool:
        cols = [c for c in _COLUMNS if c in values]
        if not cols:
            return False
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE leave_balances SET {assignments} WHERE employee_id=%s",
                tuple(values[c] for c in cols) + (int(employee_id),),
            )
            return cur.rowcount > 0
