"""Monthly leave balances.

Personal, sick and casual leave draw on a per-employee balance. The balance
is credited once per calendar month, the first time it is read in that
month; unused days carry over. Every other leave type is untracked.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import LeaveType

MONTHLY_ALLOCATION = {
    LeaveType.PERSONAL: 1.0,
    LeaveType.SICK: 0.5,
    LeaveType.CASUAL: 0.5,
}

BALANCE_TYPES = tuple(MONTHLY_ALLOCATION)


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def balance_type_for(leave_type: LeaveType) -> Optional[LeaveType]:
    return leave_type if leave_type in MONTHLY_ALLOCATION else None


def allocation_by_column() -> dict[str, float]:
    return {t.value: amount for t, amount in MONTHLY_ALLOCATION.items()}
