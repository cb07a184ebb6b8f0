from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Payslip:
    """One PDF per employee and pay period; ``file_path`` never leaves the server."""

    payslip_id: int
    employee_id: int
    month: int
    year: int
    file_name: str
    file_path: str
    file_size: int = 0
    uploaded_by: Optional[int] = None
    uploaded_at: Optional[datetime] = None
    remarks: Optional[str] = None
    # read model
    employee_name: Optional[str] = None
    employee_code: Optional[str] = None


def payslip_to_dict(payslip: Payslip) -> dict:
    return {
        "payslip_id": payslip.payslip_id,
        "employee_id": payslip.employee_id,
        "employee_name": payslip.employee_name,
        "employee_code": payslip.employee_code,
        "month": payslip.month,
        "year": payslip.year,
        "file_name": payslip.file_name,
        "file_size": payslip.file_size,
        "uploaded_by": payslip.uploaded_by,
        "uploaded_at": payslip.uploaded_at.isoformat() if payslip.uploaded_at else None,
        "remarks": payslip.remarks,
    }
