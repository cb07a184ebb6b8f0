from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus, Role

SENSITIVE_FIELDS = (
    "gross_salary",
    "bank_account_number",
    "bank_name",
    "ifsc_code",
    "pan_card",
    "aadhar_card",
    "uan_number",
    "pf_number",
    "esi_number",
)

EDITABLE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "role",
    "management_level",
    "department_id",
    "position",
    "phone",
    "reporting_manager_id",
    "saturday_working",
    "joining_date",
) + SENSITIVE_FIELDS


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Plain data; no database access. ``department_name`` is filled by the
    repository join and is read-only.
    """

    employee_id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str
    password_hash: str
    role: Role
    management_level: int
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    reporting_manager_id: Optional[int] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    is_active: bool = True
    saturday_working: bool = False
    joining_date: Optional[date] = None
    created_at: Optional[datetime] = None
    gross_salary: Optional[Decimal] = None
    bank_account_number: Optional[str] = None
    bank_name: Optional[str] = None
    ifsc_code: Optional[str] = None
    pan_card: Optional[str] = None
    aadhar_card: Optional[str] = None
    uan_number: Optional[str] = None
    pf_number: Optional[str] = None
    esi_number: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


def employee_to_dict(employee: Employee, *, include_sensitive: bool) -> dict:
    data = asdict(employee)
    data.pop("password_hash", None)
    data["role"] = employee.role.value
    data["status"] = employee.status.value
    data["full_name"] = employee.full_name
    if employee.joining_date is not None:
        data["joining_date"] = employee.joining_date.isoformat()
    if employee.created_at is not None:
        data["created_at"] = employee.created_at.isoformat()
    if include_sensitive:
        if employee.gross_salary is not None:
            data["gross_salary"] = float(employee.gross_salary)
    else:
        for field in SENSITIVE_FIELDS:
            data.pop(field, None)
    return data
