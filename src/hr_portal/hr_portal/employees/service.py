from __future__ import annotations

import csv
import io
import logging
from typing import Iterable, Mapping, Optional

from werkzeug.security import generate_password_hash

from ..auth.model import Viewer
from ..common.datetime_utils import parse_optional_date
from ..common.validators import (
    optional_int,
    require_enum,
    require_management_level,
    require_min_length,
    require_non_empty,
)
from ..core.constants import DEFAULT_FINANCE_DEPARTMENT_NAMES, DEFAULT_HR_DEPARTMENT_NAMES, MIN_PASSWORD_LENGTH
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..permissions import policy
from .model import EDITABLE_FIELDS, SENSITIVE_FIELDS, Employee, employee_to_dict
from .reporting import ReportingLines
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use cases: employee directory and record management."""

    def __init__(
        self,
        employees: EmployeeRepository,
        *,
        finance_names: Iterable[str] = DEFAULT_FINANCE_DEPARTMENT_NAMES,
        hr_names: Iterable[str] = DEFAULT_HR_DEPARTMENT_NAMES,
    ):
        self._employees = employees
        self._lines = ReportingLines(employees)
        self._finance_names = tuple(finance_names)
        self._hr_names = tuple(hr_names)

    def can_view_sensitive_data(self, viewer: Viewer) -> bool:
        return policy.can_view_sensitive_data(viewer, finance_names=self._finance_names)

    def _require(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_for_viewer(
        self,
        viewer: Viewer,
        *,
        status: Optional[str] = None,
        department_id=None,
        search: Optional[str] = None,
    ) -> tuple[list[dict], bool]:
        status_enum = require_enum(EmployeeStatus, status, "status") if status else None
        rows = self._employees.list_all(
            status=status_enum,
            department_id=optional_int(department_id, "department"),
            search=(search or "").strip() or None,
        )
        visible = self._lines.directory_ids(viewer)
        if visible is not None:
            rows = [e for e in rows if e.employee_id in visible]

        sensitive = self.can_view_sensitive_data(viewer)
        return [employee_to_dict(e, include_sensitive=sensitive) for e in rows], sensitive

    def get_for_viewer(self, viewer: Viewer, employee_id: int) -> tuple[dict, bool]:
        employee = self._require(employee_id)
        sensitive = self.can_view_sensitive_data(viewer)
        return employee_to_dict(employee, include_sensitive=sensitive), sensitive

    def _clean_fields(self, data: Mapping, *, allow_sensitive: bool) -> dict:
        fields: dict = {}
        for key in EDITABLE_FIELDS:
            if key not in data:
                continue
            if key in SENSITIVE_FIELDS and not allow_sensitive:
                continue
            fields[key] = data[key]

        if "first_name" in fields:
            fields["first_name"] = require_non_empty(fields["first_name"], "First name")
        if "last_name" in fields:
            fields["last_name"] = require_non_empty(fields["last_name"], "Last name")
        if "email" in fields:
            fields["email"] = require_non_empty(fields["email"], "Email").lower()
        if "role" in fields:
            fields["role"] = require_enum(Role, fields["role"], "role")
        if "management_level" in fields:
            fields["management_level"] = require_management_level(fields["management_level"])
        if "department_id" in fields:
            fields["department_id"] = optional_int(fields["department_id"], "Department")
        if "reporting_manager_id" in fields:
            fields["reporting_manager_id"] = optional_int(fields["reporting_manager_id"], "Reporting manager")
        if "saturday_working" in fields:
            fields["saturday_working"] = bool(fields["saturday_working"])
        if "joining_date" in fields:
            fields["joining_date"] = parse_optional_date(fields["joining_date"], "Joining date")
        if "pan_card" in fields and fields["pan_card"]:
            fields["pan_card"] = str(fields["pan_card"]).strip().upper()
        return fields

    def create(self, viewer: Viewer, data: Mapping) -> int:
        if not policy.can_manage_employees(viewer.level):
            raise AuthorizationError("Only L2 and above can create employees")

        code = require_non_empty(data.get("employee_code"), "Employee ID")
        password = require_min_length(data.get("password"), "Password", MIN_PASSWORD_LENGTH)

        # Sensitive fields may be captured at creation by anyone allowed to create.
        fields = self._clean_fields(data, allow_sensitive=True)
        for required in ("first_name", "last_name", "email"):
            if required not in fields:
                raise ValidationError(f"{required.replace('_', ' ').capitalize()} is required")
        fields.setdefault("role", Role.EMPLOYEE)
        fields.setdefault("management_level", 0)

        if not policy.can_assign_level(viewer.level, fields["management_level"]):
            raise AuthorizationError("You can only create employees below your own level")
        if fields["role"] != Role.EMPLOYEE and not policy.can_change_role(viewer.level):
            raise AuthorizationError("Only L3 and above can assign the admin or hr role")
        if self._employees.get_by_code(code):
            raise ValidationError("Employee ID already exists")
        if self._employees.get_by_email(fields["email"]):
            raise ValidationError("Email already exists")

        fields["employee_code"] = code
        fields["password_hash"] = generate_password_hash(password)
        new_id = self._employees.create(fields=fields)
        logger.info("L%s employee %s created employee %s", viewer.level, viewer.employee_id, new_id)
        return new_id

    def update(self, viewer: Viewer, employee_id: int, data: Mapping) -> dict:
        target = self._require(employee_id)
        is_self = target.employee_id == viewer.employee_id
        if not policy.can_edit_employee_record(viewer.level, target.management_level, is_self):
            raise AuthorizationError("You do not have permission to update this employee")
        if viewer.level == policy.L2 and target.employee_id not in self._lines.managed_hierarchy_ids(viewer.employee_id):
            raise AuthorizationError("You can only update employees in your management hierarchy")

        allow_sensitive = self.can_view_sensitive_data(viewer)
        fields = self._clean_fields(data, allow_sensitive=allow_sensitive)
        self._check_level_and_role_change(viewer, target, fields)

        if "email" in fields and fields["email"] != target.email:
            other = self._employees.get_by_email(fields["email"])
            if other and other.employee_id != target.employee_id:
                raise ValidationError("Email already exists")
        if fields.get("reporting_manager_id") == target.employee_id:
            raise ValidationError("An employee cannot report to themselves")

        password = data.get("password")
        if password and str(password).strip():
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            fields["password_hash"] = generate_password_hash(password)

        self._employees.update(target.employee_id, fields=fields)
        logger.info("Employee %s updated by %s (fields=%s)", target.employee_id, viewer.employee_id, sorted(fields))
        return employee_to_dict(self._require(target.employee_id), include_sensitive=allow_sensitive)

    @staticmethod
    def _check_level_and_role_change(viewer: Viewer, target: Employee, fields: Mapping) -> None:
        new_level = fields.get("management_level", target.management_level)
        if new_level != target.management_level and not (
            policy.can_assign_level(viewer.level, new_level)
            and policy.can_assign_level(viewer.level, target.management_level)
        ):
            raise AuthorizationError("You can only move employees between levels below your own")
        if fields.get("role", target.role) != target.role and not policy.can_change_role(viewer.level):
            raise AuthorizationError("Only L3 and above can change an employee's role")

    def delete(self, viewer: Viewer, employee_id: int) -> None:
        target = self._require(employee_id)
        if target.employee_id == viewer.employee_id:
            raise ValidationError("You cannot delete your own account")
        if not policy.can_delete_employee(viewer.level, target.management_level):
            raise AuthorizationError("You do not have permission to delete this employee")
        if not self._employees.delete_by_id(target.employee_id):
            raise ValidationError("Failed to delete employee")
        logger.info("Employee %s deleted by %s", target.employee_id, viewer.employee_id)

    def set_status(self, viewer: Viewer, employee_id: int, *, status: str, reason: str = "") -> dict:
        new_status = require_enum(EmployeeStatus, status, "status")
        target = self._require(employee_id)
        if target.employee_id == viewer.employee_id:
            raise ValidationError("You cannot change your own status")
        if not policy.can_manage_status(viewer.level, target.management_level):
            raise AuthorizationError("You do not have permission to change this employee's status")

        is_active = target.is_active
        if new_status == EmployeeStatus.INACTIVE:
            is_active = False
        elif new_status == EmployeeStatus.ACTIVE:
            is_active = True

        self._employees.set_status(target.employee_id, status=new_status, is_active=is_active)
        logger.info(
            "Employee %s (L%s) set %s (L%s) to %s. Reason: %s",
            viewer.employee_id, viewer.level, target.employee_id, target.management_level,
            new_status.value, reason or "N/A",
        )
        return employee_to_dict(self._require(target.employee_id), include_sensitive=self.can_view_sensitive_data(viewer))

    def stats(self, viewer: Viewer) -> dict:
        if not policy.can_manage_employees(viewer.level):
            raise AuthorizationError("Only L2 and above can view employee statistics")
        return self._employees.stats()

    def export_joinings_csv(self, viewer: Viewer, *, start=None, end=None) -> str:
        """CSV of employees by joining date; HR department only."""
        if not policy.is_hr_department_user(viewer, hr_names=self._hr_names):
            raise AuthorizationError("Access restricted to Human Resources department members only")

        start_d = parse_optional_date(start, "Start date")
        end_d = parse_optional_date(end, "End date")

        rows = [
            e for e in self._employees.list_all()
            if e.joining_date is not None
            and (start_d is None or e.joining_date >= start_d)
            and (end_d is None or e.joining_date <= end_d)
        ]
        rows.sort(key=lambda e: e.joining_date)

        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(["Employee ID", "Name", "Email", "Department", "Position", "Joining Date", "Status"])
        for e in rows:
            writer.writerow([
                e.employee_code,
                e.full_name,
                e.email,
                e.department_name or "-",
                e.position or "-",
                e.joining_date.isoformat(),
                e.status.value,
            ])
        return buf.getvalue()
