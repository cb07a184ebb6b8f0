from __future__ import annotations

import csv
import io
import logging
from datetime import datetime, timedelta
from typing import Mapping, Optional

from ..auth.model import Viewer
from ..common.datetime_utils import now_local, parse_optional_date, parse_optional_datetime
from ..common.validators import optional_int, require_enum
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.reporting import ReportingLines
from ..employees.repository import EmployeeRepository
from ..permissions.policy import L1, L2
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, attendance_to_dict
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


def working_hours_between(check_in: Optional[datetime], check_out: Optional[datetime]) -> float:
    if not check_in or not check_out:
        return 0.0
    return round((check_out - check_in).total_seconds() / 3600, 2)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._lines = ReportingLines(employees)
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def check_in(self, viewer: Viewer, *, now: datetime | None = None) -> dict:
        now = now or now_local()
        today = now.date()

        employee = self._employees.get_by_id(viewer.employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        weekday = today.weekday()
        if weekday == SUNDAY:
            raise ValidationError("Check-in is not allowed on Sundays")
        if weekday == SATURDAY and not employee.saturday_working:
            raise ValidationError("Check-in is not allowed on Saturdays for your schedule")

        existing = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        if existing and existing.check_in is not None:
            raise ValidationError("You have already checked in today")

        if existing:
            self._attendance.complete_checkin(attendance_id=existing.attendance_id, check_in=now, status=AttendanceStatus.PRESENT)
        else:
            self._attendance.create_checkin(
                employee_id=employee.employee_id,
                work_date=today,
                check_in=now,
                status=AttendanceStatus.PRESENT,
            )
        logger.info("Employee %s checked in at %s", employee.employee_id, now.isoformat())
        return attendance_to_dict(self._attendance.get_for_employee_and_date(employee.employee_id, today))

    def check_out(self, viewer: Viewer, *, now: datetime | None = None) -> dict:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(viewer.employee_id, today)
        if not record or record.check_in is None:
            raise ValidationError("You have not checked in today")
        if record.check_out is not None:
            raise ValidationError("You have already checked out today")

        hours = working_hours_between(record.check_in, now)
        decision = self._factory.for_checkout(working_hours=hours).decide_checkout(working_hours=hours)

        self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out=now,
            status=decision.status,
            working_hours=hours,
            notes=decision.note,
        )
        logger.info("Employee %s checked out (%.2fh, %s)", viewer.employee_id, hours, decision.status.value)
        return attendance_to_dict(self._attendance.get_by_id(record.attendance_id))

    def today(self, viewer: Viewer, *, now: datetime | None = None) -> Optional[dict]:
        today = (now or now_local()).date()
        record = self._attendance.get_for_employee_and_date(viewer.employee_id, today)
        return attendance_to_dict(record) if record else None

    def _scope(self, viewer: Viewer, employee_id: Optional[int], *, team: bool) -> Optional[set[int]]:
        """Employee ids whose records the viewer may read; ``None`` means everyone."""
        visible = self._lines.team_ids(viewer)
        if employee_id is not None and employee_id != viewer.employee_id:
            if visible is not None and employee_id not in visible:
                raise AuthorizationError("You cannot view attendance for this employee")
            return {employee_id}
        if team:
            return visible
        return {viewer.employee_id}

    def history(
        self,
        viewer: Viewer,
        *,
        employee_id=None,
        team: bool = False,
        start=None,
        end=None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[dict]:
        ids = self._scope(viewer, optional_int(employee_id, "Employee"), team=team)
        rows = self._attendance.list_records(
            employee_ids=ids,
            start_date=parse_optional_date(start, "Start date"),
            end_date=parse_optional_date(end, "End date"),
            limit=limit,
        )
        return [attendance_to_dict(r) for r in rows]

    def stats(self, viewer: Viewer, *, employee_id=None, start=None, end=None, now: datetime | None = None) -> dict:
        today = (now or now_local()).date()
        start_d = parse_optional_date(start, "Start date") or today.replace(day=1)
        end_d = parse_optional_date(end, "End date") or today
        if end_d < start_d:
            raise ValidationError("End date must not be before start date")

        ids = self._scope(viewer, optional_int(employee_id, "Employee"), team=False)
        rows = self._attendance.list_records(employee_ids=ids, start_date=start_d, end_date=end_d)

        counts = {s.value: 0 for s in AttendanceStatus}
        total_hours = 0.0
        for r in rows:
            counts[r.status.value] += 1
            total_hours += float(r.working_hours or 0)
        return {
            "start_date": start_d.isoformat(),
            "end_date": end_d.isoformat(),
            "total_days": len(rows),
            "by_status": counts,
            "total_hours": round(total_hours, 2),
        }

    def update_record(self, viewer: Viewer, attendance_id: int, data: Mapping) -> dict:
        if viewer.level < L1:
            raise AuthorizationError("Only managers can correct attendance records")
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")

        visible = self._lines.team_ids(viewer)
        if visible is not None and record.employee_id not in visible:
            raise AuthorizationError("You cannot correct attendance for this employee")

        check_in = parse_optional_datetime(data["check_in"], "Check-in") if "check_in" in data else record.check_in
        check_out = parse_optional_datetime(data["check_out"], "Check-out") if "check_out" in data else record.check_out
        if check_in and check_out and check_out < check_in:
            raise ValidationError("Check-out cannot be earlier than check-in")
        status = require_enum(AttendanceStatus, data["status"], "status") if data.get("status") else record.status
        notes = data["notes"] if "notes" in data else record.notes

        self._attendance.update_record(
            attendance_id=record.attendance_id,
            check_in=check_in,
            check_out=check_out,
            status=status,
            working_hours=working_hours_between(check_in, check_out),
            notes=notes,
        )
        logger.info("Attendance %s corrected by %s (status=%s)", record.attendance_id, viewer.employee_id, status.value)
        return attendance_to_dict(self._attendance.get_by_id(record.attendance_id))

    def export_csv(self, viewer: Viewer, *, start=None, end=None, now: datetime | None = None) -> str:
        if viewer.level < L2:
            raise AuthorizationError("Only L2 and above can export attendance")

        today = (now or now_local()).date()
        start_d = parse_optional_date(start, "Start date") or today - timedelta(days=30)
        end_d = parse_optional_date(end, "End date") or today
        if end_d < start_d:
            raise ValidationError("End date must not be before start date")

        rows = self._attendance.list_records(
            employee_ids=self._lines.team_ids(viewer),
            start_date=start_d,
            end_date=end_d,
        )

        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(["Employee ID", "Name", "Department", "Date", "Check In", "Check Out", "Hours", "Status", "Notes"])
        for r in sorted(rows, key=lambda x: (x.work_date, x.employee_name or "")):
            writer.writerow(_csv_row(r))
        logger.info("Attendance export %s..%s by %s (%d rows)", start_d, end_d, viewer.employee_id, len(rows))
        return buf.getvalue()


def _csv_row(r: AttendanceRecord) -> list:
    return [
        r.employee_code or r.employee_id,
        r.employee_name or "",
        r.department_name or "-",
        r.work_date.isoformat(),
        r.check_in.strftime("%H:%M:%S") if r.check_in else "-",
        r.check_out.strftime("%H:%M:%S") if r.check_out else "-",
        f"{float(r.working_hours or 0):.2f}",
        r.status.value,
        r.notes or "",
    ]
