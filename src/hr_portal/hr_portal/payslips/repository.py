from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Payslip


class PayslipRepository(Protocol):
    def get_by_id(self, payslip_id: int) -> Optional[Payslip]:
        raise NotImplementedError

    def list_payslips(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[Payslip]:
        """Newest period first."""

        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        month: int,
        year: int,
        file_name: str,
        file_path: str,
        file_size: int,
        uploaded_by: int,
        remarks: Optional[str],
    ) -> int:
        """Insert or replace the payslip for (employee, month, year); returns its id."""

        raise NotImplementedError
