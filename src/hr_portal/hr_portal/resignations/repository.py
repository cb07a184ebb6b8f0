from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ExitProcedure, ProcedureStatus, ResignationStatus
from .model import Resignation


class ResignationRepository(Protocol):
    def get_by_id(self, resignation_id: int) -> Optional[Resignation]:
        raise NotImplementedError

    def list_resignations(self, *, employee_id: Optional[int] = None) -> Sequence[Resignation]:
        raise NotImplementedError

    def find_open(self, employee_id: int) -> Optional[Resignation]:
        """A pending or approved resignation of the employee, if any."""

        raise NotImplementedError

    def create(self, *, employee_id: int, resignation_date: date, last_working_date: date, reason: str) -> int:
        """Also creates the pending exit checklist."""

        raise NotImplementedError

    def decide(self, resignation_id: int, *, status: ResignationStatus, approved_by: int, remarks: Optional[str]) -> bool:
        raise NotImplementedError

    def set_status(self, resignation_id: int, *, status: ResignationStatus) -> bool:
        raise NotImplementedError

    def update_procedure(
        self,
        resignation_id: int,
        *,
        procedure: ExitProcedure,
        status: ProcedureStatus,
        completed_by: int,
        remarks: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def update_last_working_date(self, resignation_id: int, *, last_working_date: date) -> bool:
        raise NotImplementedError
