from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AssetStatus


@dataclass(frozen=True)
class Asset:
    asset_id: int
    employee_id: int
    name: str
    status: AssetStatus = AssetStatus.ACTIVE
    allocated_at: Optional[datetime] = None
    allocated_by: Optional[int] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[int] = None
    employee_name: Optional[str] = None


def asset_to_dict(asset: Asset) -> dict:
    return {
        "asset_id": asset.asset_id,
        "employee_id": asset.employee_id,
        "employee_name": asset.employee_name,
        "name": asset.name,
        "status": asset.status.value,
        "allocated_at": asset.allocated_at.isoformat() if asset.allocated_at else None,
        "allocated_by": asset.allocated_by,
        "revoked_at": asset.revoked_at.isoformat() if asset.revoked_at else None,
        "revoked_by": asset.revoked_by,
    }
