from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional

from ..auth.model import Viewer
from ..common.datetime_utils import now_local, parse_optional_date
from ..common.validators import require_enum, require_non_empty
from ..core.constants import DEFAULT_FINANCE_DEPARTMENT_NAMES, DEFAULT_HR_DEPARTMENT_NAMES
from ..core.enums import EmployeeStatus, ExitProcedure, ProcedureStatus, ResignationStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..permissions import policy
from .model import Resignation, resignation_to_dict
from .repository import ResignationRepository

logger = logging.getLogger(__name__)


class ResignationService:
    """Use cases: resignation requests and the exit checklist."""

    def __init__(
        self,
        resignations: ResignationRepository,
        employees: EmployeeRepository,
        *,
        finance_names: Iterable[str] = DEFAULT_FINANCE_DEPARTMENT_NAMES,
        hr_names: Iterable[str] = DEFAULT_HR_DEPARTMENT_NAMES,
    ):
        self._resignations = resignations
        self._employees = employees
        self._finance_names = tuple(finance_names)
        self._hr_names = tuple(hr_names)

    def _require(self, resignation_id: int) -> Resignation:
        resignation = self._resignations.get_by_id(int(resignation_id))
        if not resignation:
            raise NotFoundError("Resignation not found")
        return resignation

    def _check_process(self, viewer: Viewer, resignation: Resignation) -> None:
        if viewer.level < policy.L3:
            raise AuthorizationError("Only L3 and above can process resignations")
        employee = self._employees.get_by_id(resignation.employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not policy.can_process_resignation(viewer.level, employee.management_level):
            raise AuthorizationError("Only L4 can process resignations of L3 and above")

    def submit(self, viewer: Viewer, data: Mapping, *, now: Optional[datetime] = None) -> dict:
        today = (now or now_local()).date()
        last_day = parse_optional_date(data.get("last_working_date"), "Last working date")
        if last_day is None:
            raise ValidationError("Last working date is required")
        if last_day < today:
            raise ValidationError("Last working date cannot be in the past")
        reason = require_non_empty(data.get("reason"), "Reason")

        if self._resignations.find_open(viewer.employee_id):
            raise ValidationError("You already have a pending resignation request")

        resignation_id = self._resignations.create(
            employee_id=viewer.employee_id,
            resignation_date=today,
            last_working_date=last_day,
            reason=reason,
        )
        logger.info("Employee %s submitted resignation %s (last day %s)", viewer.employee_id, resignation_id, last_day)
        return resignation_to_dict(self._require(resignation_id))

    def list_for_viewer(self, viewer: Viewer) -> list[dict]:
        employee_id = None if viewer.level >= policy.L3 else viewer.employee_id
        return [resignation_to_dict(r) for r in self._resignations.list_resignations(employee_id=employee_id)]

    def get(self, viewer: Viewer, resignation_id: int) -> dict:
        resignation = self._require(resignation_id)
        if resignation.employee_id != viewer.employee_id and viewer.level < policy.L3:
            raise AuthorizationError("Not authorized to view this resignation")
        return resignation_to_dict(resignation)

    def decide(self, viewer: Viewer, resignation_id: int, *, status: str, remarks: str = "") -> dict:
        new_status = require_enum(ResignationStatus, status, "status")
        if new_status not in (ResignationStatus.APPROVED, ResignationStatus.REJECTED):
            raise ValidationError("Status must be approved or rejected")

        resignation = self._require(resignation_id)
        if resignation.status != ResignationStatus.PENDING:
            raise ValidationError("This resignation has already been processed")
        self._check_process(viewer, resignation)

        if not self._resignations.decide(
            resignation.resignation_id,
            status=new_status,
            approved_by=viewer.employee_id,
            remarks=(remarks or "").strip() or None,
        ):
            raise ValidationError("This resignation has already been processed")

        if new_status == ResignationStatus.REJECTED:
            self._employees.set_status(resignation.employee_id, status=EmployeeStatus.ACTIVE, is_active=True)
        logger.info("Resignation %s %s by %s", resignation.resignation_id, new_status.value, viewer.employee_id)
        return resignation_to_dict(self._require(resignation.resignation_id))

    def update_procedure(self, viewer: Viewer, resignation_id: int, data: Mapping) -> dict:
        procedure = require_enum(ExitProcedure, data.get("procedure_type"), "procedure type")
        status = require_enum(ProcedureStatus, data.get("status") or ProcedureStatus.COMPLETED.value, "procedure status")

        resignation = self._require(resignation_id)
        self._check_process(viewer, resignation)

        self._resignations.update_procedure(
            resignation.resignation_id,
            procedure=procedure,
            status=status,
            completed_by=viewer.employee_id,
            remarks=(data.get("remarks") or "").strip() or None,
        )

        updated = self._require(resignation.resignation_id)
        if updated.status == ResignationStatus.APPROVED and updated.all_procedures_completed():
            self._resignations.set_status(updated.resignation_id, status=ResignationStatus.COMPLETED)
            self._employees.set_status(updated.employee_id, status=EmployeeStatus.INACTIVE, is_active=False)
            logger.info("Resignation %s completed; employee %s deactivated", updated.resignation_id, updated.employee_id)
            updated = self._require(updated.resignation_id)
        return resignation_to_dict(updated)

    def update_last_working_date(self, viewer: Viewer, resignation_id: int, value) -> dict:
        if not policy.can_update_exit_date(viewer, finance_names=self._finance_names, hr_names=self._hr_names):
            raise AuthorizationError("Only L4 or L3 members of Finance or HR can change the last working date")
        last_day = parse_optional_date(value, "Last working date")
        if last_day is None:
            raise ValidationError("Last working date is required")

        resignation = self._require(resignation_id)
        if resignation.status in (ResignationStatus.REJECTED, ResignationStatus.COMPLETED):
            raise ValidationError(f"Cannot change the last working date of a {resignation.status.value} resignation")
        if last_day < resignation.resignation_date:
            raise ValidationError("Last working date cannot be before the resignation date")

        self._resignations.update_last_working_date(resignation.resignation_id, last_working_date=last_day)
        logger.info("Resignation %s last working date set to %s by %s", resignation.resignation_id, last_day, viewer.employee_id)
        return resignation_to_dict(self._require(resignation.resignation_id))
