from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceSource, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one work date."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    status: AttendanceStatus
    source: AttendanceSource = AttendanceSource.MANUAL
    working_hours: float = 0.0
    notes: Optional[str] = None
    # read model, filled by joins
    employee_name: Optional[str] = None
    employee_code: Optional[str] = None
    department_name: Optional[str] = None


def attendance_to_dict(record: AttendanceRecord) -> dict:
    return {
        "attendance_id": record.attendance_id,
        "employee_id": record.employee_id,
        "employee_name": record.employee_name,
        "employee_code": record.employee_code,
        "department_name": record.department_name,
        "work_date": record.work_date.isoformat(),
        "check_in": record.check_in.isoformat() if record.check_in else None,
        "check_out": record.check_out.isoformat() if record.check_out else None,
        "status": record.status.value,
        "source": record.source.value,
        "working_hours": round(float(record.working_hours or 0), 2),
        "notes": record.notes,
    }
