from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import Leave, LeaveBalance


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        days: float,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[Leave]:
        raise NotImplementedError

    def list_leaves(
        self,
        *,
        employee_ids: Optional[Iterable[int]] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[Leave]:
        """Newest first. ``employee_ids=None`` means every employee."""

        raise NotImplementedError

    def decide(self, leave_id: int, *, status: LeaveStatus, approved_by: int, remarks: Optional[str]) -> bool:
        """Only transitions rows that are still pending."""

        raise NotImplementedError

    def delete_pending(self, leave_id: int) -> bool:
        raise NotImplementedError


class LeaveBalanceRepository(Protocol):
    def get(self, employee_id: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def credit_month(self, employee_id: int, *, month: str, allocation: Mapping[str, float]) -> None:
        """Add ``allocation`` once for ``month``; a second call in the same month is a no-op."""

        raise NotImplementedError

    def adjust(self, employee_id: int, *, leave_type: LeaveType, delta: float) -> bool:
        """Add ``delta`` to one balance; refused (False) if it would go negative."""

        raise NotImplementedError

    def set_values(self, employee_id: int, *, values: Mapping[str, float]) -> bool:
        raise NotImplementedError
