from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator

from ..core.enums import LeaveType
from ..core.exceptions import ValidationError


def compute_leave_days(leave_type: LeaveType, start: date, end: date) -> float:
    """Inclusive day count; a half-day leave is a single date worth 0.5."""
    if end < start:
        raise ValidationError("End date must not be before start date")
    if leave_type == LeaveType.HALF_DAY:
        if start != end:
            raise ValidationError("Half-day leave must start and end on the same date")
        return 0.5
    return float((end - start).days + 1)


def iter_leave_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
