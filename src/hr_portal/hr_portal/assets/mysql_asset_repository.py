from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AssetStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Asset
from .repository import AssetRepository

_SELECT = """
    SELECT a.asset_id, a.employee_id, a.name, a.status, a.allocated_at, a.allocated_by,
           a.revoked_at, a.revoked_by, CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM assets a
    JOIN employees e ON e.employee_id = a.employee_id
"""


def _row_to_asset(r: dict) -> Asset:
    return Asset(
        asset_id=int(r["asset_id"]),
        employee_id=int(r["employee_id"]),
        name=r["name"],
        status=AssetStatus(r["status"]),
        allocated_at=r.get("allocated_at"),
        allocated_by=r.get("allocated_by"),
        revoked_at=r.get("revoked_at"),
        revoked_by=r.get("revoked_by"),
        employee_name=r.get("employee_name"),
    )


class MySQLAssetRepository(AssetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, asset_id: int) -> Optional[Asset]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE a.asset_id=%s", (int(asset_id),))
            row = fetchone(cur)
            return _row_to_asset(row) if row else None

    def list_assets(self, *, employee_ids=None) -> Sequence[Asset]:
        sql = _SELECT
        params: tuple = ()
        if employee_ids is not None:
            ids = [int(i) for i in employee_ids]
            if not ids:
                return []
            sql += f" WHERE a.employee_id IN ({in_clause(ids)})"
            params = tuple(ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY a.allocated_at DESC, a.asset_id DESC", params)
            return [_row_to_asset(r) for r in fetchall(cur)]

    def allocate(self, *, employee_id: int, name: str, allocated_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO assets (employee_id, name, status, allocated_by) VALUES (%s, %s, %s, %s)",
                (int(employee_id), name, AssetStatus.ACTIVE.value, int(allocated_by)),
            )
            return int(cur.lastrowid)

    def revoke(self, asset_id: int, *, revoked_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE assets SET status=%s, revoked_at=NOW(), revoked_by=%s
                WHERE asset_id=%s AND status=%s
                """,
                (AssetStatus.REVOKED.value, int(revoked_by), int(asset_id), AssetStatus.ACTIVE.value),
            )
            return cur.rowcount > 0
