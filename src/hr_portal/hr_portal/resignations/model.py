from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import ExitProcedure, ProcedureStatus, ResignationStatus


@dataclass(frozen=True)
class ExitProcedureItem:
    procedure_type: ExitProcedure
    status: ProcedureStatus = ProcedureStatus.PENDING
    completed_by: Optional[int] = None
    completed_at: Optional[datetime] = None
    remarks: Optional[str] = None


@dataclass(frozen=True)
class Resignation:
    resignation_id: int
    employee_id: int
    resignation_date: date
    last_working_date: date
    reason: str
    status: ResignationStatus = ResignationStatus.PENDING
    approved_by: Optional[int] = None
    approval_date: Optional[datetime] = None
    approval_remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    procedures: tuple[ExitProcedureItem, ...] = field(default_factory=tuple)
    employee_name: Optional[str] = None
    employee_code: Optional[str] = None

    def all_procedures_completed(self) -> bool:
        done = {p.procedure_type for p in self.procedures if p.status == ProcedureStatus.COMPLETED}
        return all(kind in done for kind in ExitProcedure)


def resignation_to_dict(resignation: Resignation) -> dict:
    by_type = {p.procedure_type: p for p in resignation.procedures}
    procedures = {}
    for kind in ExitProcedure:
        item = by_type.get(kind, ExitProcedureItem(procedure_type=kind))
        procedures[kind.value] = {
            "status": item.status.value,
            "completed_by": item.completed_by,
            "completed_at": item.completed_at.isoformat() if item.completed_at else None,
            "remarks": item.remarks,
        }
    return {
        "resignation_id": resignation.resignation_id,
        "employee_id": resignation.employee_id,
        "employee_name": resignation.employee_name,
        "employee_code": resignation.employee_code,
        "resignation_date": resignation.resignation_date.isoformat(),
        "last_working_date": resignation.last_working_date.isoformat(),
        "reason": resignation.reason,
        "status": resignation.status.value,
        "approved_by": resignation.approved_by,
        "approval_date": resignation.approval_date.isoformat() if resignation.approval_date else None,
        "approval_remarks": resignation.approval_remarks,
        "exit_procedures": procedures,
    }
