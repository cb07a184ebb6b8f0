from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from ..attendance.repository import AttendanceRepository
from ..auth.model import Viewer
from ..common.datetime_utils import now_local, parse_optional_date
from ..common.validators import optional_int, require_enum, require_non_empty, require_non_negative_number
from ..core.constants import DEFAULT_FINANCE_DEPARTMENT_NAMES, DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceSource, AttendanceStatus, LeaveStatus, LeaveType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.reporting import ReportingLines
from ..employees.repository import EmployeeRepository
from ..permissions import policy
from .balance import BALANCE_TYPES, allocation_by_column, balance_type_for, month_key
from .days import compute_leave_days, iter_leave_dates
from .model import Leave, LeaveBalance, leave_balance_to_dict, leave_to_dict
from .repository import LeaveBalanceRepository, LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        balances: LeaveBalanceRepository,
        *,
        finance_names: Iterable[str] = DEFAULT_FINANCE_DEPARTMENT_NAMES,
    ):
        self._leaves = leaves
        self._employees = employees
        self._attendance = attendance
        self._balances = balances
        self._lines = ReportingLines(employees)
        self._finance_names = tuple(finance_names)

    def _require(self, leave_id: int) -> Leave:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave not found")
        return leave

    def apply(self, viewer: Viewer, data: Mapping) -> dict:
        leave_type = require_enum(LeaveType, data.get("leave_type"), "leave type")
        start = parse_optional_date(data.get("start_date"), "Start date")
        end = parse_optional_date(data.get("end_date"), "End date")
        if start is None or end is None:
            raise ValidationError("Start date and end date are required")
        reason = require_non_empty(data.get("reason"), "Reason")
        days = compute_leave_days(leave_type, start, end)

        tracked = balance_type_for(leave_type)
        if tracked is not None:
            available = self._current_balance(viewer.employee_id).available(tracked)
            if days > available:
                raise ValidationError(
                    f"Insufficient {tracked.value} leave balance: {available:g} day(s) available, {days:g} requested"
                )

        leave_id = self._leaves.create(
            employee_id=viewer.employee_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            days=days,
            reason=reason,
        )
        logger.info("Employee %s applied for %s leave %s (%s days)", viewer.employee_id, leave_type.value, leave_id, days)
        return leave_to_dict(self._require(leave_id))

    def list_for_viewer(
        self,
        viewer: Viewer,
        *,
        status: Optional[str] = None,
        employee_id=None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[dict]:
        status_enum = require_enum(LeaveStatus, status, "status") if status else None
        scope = self._lines.team_ids(viewer)
        employee_id = optional_int(employee_id, "Employee")
        if employee_id is not None:
            if scope is not None and employee_id not in scope:
                raise AuthorizationError("You cannot view leaves for this employee")
            scope = {employee_id}

        rows = self._leaves.list_leaves(employee_ids=scope, status=status_enum, limit=limit)
        return [leave_to_dict(l) for l in rows]

    def get(self, viewer: Viewer, leave_id: int) -> dict:
        leave = self._require(leave_id)
        scope = self._lines.team_ids(viewer)
        if scope is not None and leave.employee_id not in scope:
            raise AuthorizationError("You cannot view this leave")
        return leave_to_dict(leave)

    def _check_can_decide(self, viewer: Viewer, leave: Leave) -> None:
        requester = self._employees.get_by_id(leave.employee_id)
        if not requester:
            raise NotFoundError("Employee not found")

        is_own = requester.employee_id == viewer.employee_id
        if not policy.can_approve_leave(viewer.level, requester.management_level, is_own):
            raise AuthorizationError("You do not have permission to decide on this leave")

        if viewer.level == policy.L1 and not self._lines.reports_directly_to(viewer.employee_id, requester.employee_id):
            raise AuthorizationError("You can only decide on leaves of your direct reports")
        if viewer.level == policy.L2 and not self._lines.is_in_reporting_chain(viewer.employee_id, requester.employee_id):
            raise AuthorizationError("You can only decide on leaves within your reporting chain")

    def decide(self, viewer: Viewer, leave_id: int, *, status: str, remarks: str = "") -> dict:
        new_status = require_enum(LeaveStatus, status, "status")
        if new_status == LeaveStatus.PENDING:
            raise ValidationError("Status must be approved or rejected")

        leave = self._require(leave_id)
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError(f"Leave has already been {leave.status.value}")
        self._check_can_decide(viewer, leave)

        # The balance is taken before the status flips and handed back if the flip loses a race.
        tracked = balance_type_for(leave.leave_type) if new_status == LeaveStatus.APPROVED else None
        if tracked is not None:
            self._current_balance(leave.employee_id)
            if not self._balances.adjust(leave.employee_id, leave_type=tracked, delta=-float(leave.days)):
                raise ValidationError(f"Insufficient {tracked.value} leave balance to approve this leave")

        if not self._leaves.decide(
            leave.leave_id,
            status=new_status,
            approved_by=viewer.employee_id,
            remarks=(remarks or "").strip() or None,
        ):
            if tracked is not None:
                self._balances.adjust(leave.employee_id, leave_type=tracked, delta=float(leave.days))
            raise ValidationError("Leave is no longer pending")

        if new_status == LeaveStatus.APPROVED:
            self._sync_attendance(leave)
        logger.info(
            "Leave %s of employee %s %s by %s (L%s)",
            leave.leave_id, leave.employee_id, new_status.value, viewer.employee_id, viewer.level,
        )
        return leave_to_dict(self._require(leave.leave_id))

    def _sync_attendance(self, leave: Leave) -> None:
        status = AttendanceStatus.HALF_DAY if leave.leave_type == LeaveType.HALF_DAY else AttendanceStatus.ON_LEAVE
        note = f"{leave.leave_type.value} leave"
        for day in iter_leave_dates(leave.start_date, leave.end_date):
            self._attendance.upsert_day(
                employee_id=leave.employee_id,
                work_date=day,
                status=status,
                source=AttendanceSource.LEAVE,
                notes=note,
            )

    def cancel(self, viewer: Viewer, leave_id: int) -> None:
        leave = self._require(leave_id)
        if leave.employee_id != viewer.employee_id and viewer.level < policy.L3:
            raise AuthorizationError("You can only cancel your own leave requests")
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError("Only pending leaves can be cancelled")
        if not self._leaves.delete_pending(leave.leave_id):
            raise ValidationError("Leave is no longer pending")
        logger.info("Leave %s cancelled by %s", leave.leave_id, viewer.employee_id)

    def _current_balance(self, employee_id: int) -> LeaveBalance:
        """Balance after this month's credit has been applied."""
        month = month_key(now_local().date())
        balance = self._balances.get(employee_id)
        if balance is None or balance.month != month:
            self._balances.credit_month(employee_id, month=month, allocation=allocation_by_column())
            balance = self._balances.get(employee_id)
        return balance or LeaveBalance(employee_id=employee_id, month=month)

    def balance(self, viewer: Viewer, employee_id=None) -> dict:
        target_id = optional_int(employee_id, "Employee") or viewer.employee_id
        if target_id != viewer.employee_id:
            scope = self._lines.team_ids(viewer)
            if scope is not None and target_id not in scope:
                raise AuthorizationError("You cannot view the leave balance of this employee")
            if not self._employees.get_by_id(target_id):
                raise NotFoundError("Employee not found")
        data = leave_balance_to_dict(self._current_balance(target_id))
        data["monthly_allocation"] = allocation_by_column()
        return data

    def set_balance(self, viewer: Viewer, employee_id: int, data: Mapping) -> dict:
        if not policy.can_adjust_leave_balance(viewer, finance_names=self._finance_names):
            raise AuthorizationError("Only Finance L3 or L4 can update leave balances")
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        values = {
            t.value: round(require_non_negative_number(data[t.value], f"{t.value.capitalize()} balance"), 1)
            for t in BALANCE_TYPES
            if t.value in data
        }
        if not values:
            raise ValidationError("Provide at least one of: " + ", ".join(t.value for t in BALANCE_TYPES))

        self._current_balance(int(employee_id))
        self._balances.set_values(int(employee_id), values=values)
        logger.info("Leave balance of employee %s set to %s by %s", employee_id, values, viewer.employee_id)
        return leave_balance_to_dict(self._current_balance(int(employee_id)))
