from __future__ import annotations

import logging
from typing import Mapping

from ..auth.model import Viewer
from ..common.validators import optional_int, require_non_empty
from ..core.enums import AssetStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.reporting import ReportingLines
from ..employees.repository import EmployeeRepository
from ..permissions import policy
from .model import asset_to_dict
from .repository import AssetRepository

logger = logging.getLogger(__name__)


class AssetService:
    def __init__(self, assets: AssetRepository, employees: EmployeeRepository):
        self._assets = assets
        self._employees = employees
        self._lines = ReportingLines(employees)

    def _check_manage(self, viewer: Viewer, target: Employee) -> None:
        if not policy.can_manage_assets(viewer.level, viewer.employee_id, target.reporting_manager_id):
            raise AuthorizationError("Only the reporting manager or an admin can manage this employee's assets")

    def list_for_viewer(self, viewer: Viewer, *, employee_id=None) -> list[dict]:
        scope = self._lines.team_ids(viewer)
        employee_id = optional_int(employee_id, "Employee")
        if employee_id is not None:
            if scope is not None and employee_id not in scope:
                raise AuthorizationError("You cannot view assets for this employee")
            scope = {employee_id}
        return [asset_to_dict(a) for a in self._assets.list_assets(employee_ids=scope)]

    def allocate(self, viewer: Viewer, data: Mapping) -> dict:
        employee_id = optional_int(data.get("employee_id"), "Employee")
        if employee_id is None:
            raise ValidationError("Employee is required")
        name = require_non_empty(data.get("name"), "Asset name")

        target = self._employees.get_by_id(employee_id)
        if not target:
            raise NotFoundError("Employee not found")
        self._check_manage(viewer, target)

        asset_id = self._assets.allocate(employee_id=target.employee_id, name=name, allocated_by=viewer.employee_id)
        logger.info("Asset %s (%s) allocated to %s by %s", asset_id, name, target.employee_id, viewer.employee_id)
        return asset_to_dict(self._assets.get_by_id(asset_id))

    def revoke(self, viewer: Viewer, asset_id: int) -> dict:
        asset = self._assets.get_by_id(int(asset_id))
        if not asset:
            raise NotFoundError("Asset not found")
        if asset.status == AssetStatus.REVOKED:
            raise ValidationError("Asset is already revoked")

        target = self._employees.get_by_id(asset.employee_id)
        if not target:
            raise NotFoundError("Employee not found")
        self._check_manage(viewer, target)

        if not self._assets.revoke(asset.asset_id, revoked_by=viewer.employee_id):
            raise ValidationError("Asset is already revoked")
        logger.info("Asset %s revoked from %s by %s", asset.asset_id, asset.employee_id, viewer.employee_id)
        return asset_to_dict(self._assets.get_by_id(asset.asset_id))
