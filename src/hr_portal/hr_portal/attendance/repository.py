from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceSource, AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_ids: Optional[Iterable[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first. ``employee_ids=None`` means every employee."""

        raise NotImplementedError

    def create_checkin(self, *, employee_id: int, work_date: date, check_in: datetime, status: AttendanceStatus) -> int:
        raise NotImplementedError

    def complete_checkin(self, *, attendance_id: int, check_in: datetime, status: AttendanceStatus) -> bool:
        """Fill the check-in of an existing row that has none yet."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out: datetime,
        status: AttendanceStatus,
        working_hours: float,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def update_record(
        self,
        *,
        attendance_id: int,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        status: AttendanceStatus,
        working_hours: float,
        notes: Optional[str] = None,
    ) -> bool:
        """Manual correction by a manager."""

        raise NotImplementedError

    def upsert_day(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        source: AttendanceSource,
        notes: Optional[str] = None,
    ) -> None:
        """Insert or overwrite the status of a whole day (approved leave)."""

        raise NotImplementedError
