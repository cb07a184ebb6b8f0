from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class Leave:
    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: float
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING
    approved_by: Optional[int] = None
    approval_date: Optional[datetime] = None
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    # read model
    employee_name: Optional[str] = None
    employee_code: Optional[str] = None
    employee_level: Optional[int] = None
    approver_name: Optional[str] = None


def leave_to_dict(leave: Leave) -> dict:
    return {
        "leave_id": leave.leave_id,
        "employee_id": leave.employee_id,
        "employee_name": leave.employee_name,
        "employee_code": leave.employee_code,
        "leave_type": leave.leave_type.value,
        "start_date": leave.start_date.isoformat(),
        "end_date": leave.end_date.isoformat(),
        "days": float(leave.days),
        "reason": leave.reason,
        "status": leave.status.value,
        "approved_by": leave.approved_by,
        "approver_name": leave.approver_name,
        "approval_date": leave.approval_date.isoformat() if leave.approval_date else None,
        "remarks": leave.remarks,
        "created_at": leave.created_at.isoformat() if leave.created_at else None,
    }


@dataclass(frozen=True)
class LeaveBalance:
    """Days left per tracked leave type; ``month`` is the last credited month (YYYY-MM)."""

    employee_id: int
    personal: float = 0.0
    sick: float = 0.0
    casual: float = 0.0
    month: Optional[str] = None

    def available(self, leave_type: LeaveType) -> float:
        return float(getattr(self, leave_type.value))


def leave_balance_to_dict(balance: LeaveBalance) -> dict:
    return {
        "employee_id": balance.employee_id,
        "personal": float(balance.personal),
        "sick": float(balance.sick),
        "casual": float(balance.casual),
        "month": balance.month,
    }
