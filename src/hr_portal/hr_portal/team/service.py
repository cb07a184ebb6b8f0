from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..attendance.model import attendance_to_dict
from ..attendance.repository import AttendanceRepository
from ..auth.model import Viewer
from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, LeaveStatus
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.model import employee_to_dict
from ..employees.repository import EmployeeRepository
from ..leaves.model import leave_to_dict
from ..leaves.repository import LeaveRepository
from ..permissions.policy import L1


class TeamService:
    """Dashboard for a manager's direct reports.

    The members, stats and pending leaves are gathered in one call; any
    failure propagates so the caller never sees a partial overview.
    """

    def __init__(self, employees: EmployeeRepository, attendance: AttendanceRepository, leaves: LeaveRepository):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves

    def overview(self, viewer: Viewer, *, now: Optional[datetime] = None) -> dict:
        if viewer.level < L1:
            raise AuthorizationError("Not authorized to view team information")

        today = (now or now_local()).date()
        me = self._employees.get_by_id(viewer.employee_id)
        if not me:
            raise NotFoundError("Employee not found")

        reports = list(self._employees.list_direct_reports(viewer.employee_id, active_only=True))
        team_ids = [e.employee_id for e in reports]

        today_rows = self._attendance.list_records(employee_ids=team_ids, start_date=today, end_date=today)
        present = sum(1 for r in today_rows if r.status == AttendanceStatus.PRESENT)
        absent = sum(1 for r in today_rows if r.status == AttendanceStatus.ABSENT)
        on_leave = sum(1 for r in today_rows if r.status in (AttendanceStatus.ON_LEAVE, AttendanceStatus.HALF_DAY))

        first_of_month = today.replace(day=1)
        month_rows = self._attendance.list_records(employee_ids=team_ids, start_date=first_of_month, end_date=today)
        days_so_far = (today - first_of_month).days + 1
        expected = len(team_ids) * days_so_far
        month_present = sum(1 for r in month_rows if r.status == AttendanceStatus.PRESENT)
        rate = round(month_present / expected * 100, 1) if expected else 0

        pending = self._leaves.list_leaves(employee_ids=team_ids, status=LeaveStatus.PENDING)

        return {
            "members": [employee_to_dict(e, include_sensitive=False) for e in [me, *reports]],
            "stats": {
                "teamSize": len(team_ids),
                "today": {
                    "present": present,
                    "absent": absent,
                    "onLeave": on_leave,
                    "notMarked": len(team_ids) - (present + absent + on_leave),
                },
                "monthlyAttendanceRate": rate,
                "workingDaysThisMonth": days_so_far,
                "pendingLeaves": len(pending),
            },
            "todayAttendance": [attendance_to_dict(r) for r in today_rows],
            "pendingLeaves": [leave_to_dict(l) for l in pending],
        }
