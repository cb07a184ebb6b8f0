from __future__ import annotations

from typing import Optional

from ..auth.model import Viewer
from ..permissions.policy import L0, L1, L2, L3
from .repository import EmployeeRepository


class ReportingLines:
    """Who a viewer may see, derived from reporting-manager links.

    ``None`` from the ``*_ids`` methods means "everyone" (L3 and above).
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def team_ids(self, viewer: Viewer) -> Optional[set[int]]:
        """Scope for leaves, assets and attendance records."""
        level = viewer.level
        if level >= L3:
            return None

        ids = {viewer.employee_id}
        if level == L1:
            ids.update(e.employee_id for e in self._employees.list_direct_reports(viewer.employee_id, level=L0, active_only=True))
        elif level == L2:
            ids.update(self.managed_hierarchy_ids(viewer.employee_id, active_only=True))
        return ids

    def managed_hierarchy_ids(self, senior_id: int, *, active_only: bool = False) -> set[int]:
        """L1 managers reporting to ``senior_id`` plus their L0 reports."""
        ids: set[int] = set()
        for m in self._employees.list_direct_reports(senior_id, level=L1, active_only=active_only):
            ids.add(m.employee_id)
            ids.update(
                e.employee_id
                for e in self._employees.list_direct_reports(m.employee_id, level=L0, active_only=active_only)
            )
        return ids

    def directory_ids(self, viewer: Viewer) -> Optional[set[int]]:
        """Scope for the employee directory: self, direct reports and peers."""
        level = viewer.level
        if level >= L3:
            return None

        me = self._employees.get_by_id(viewer.employee_id)
        if me is None:
            return {viewer.employee_id}

        ids = {me.employee_id}
        direct = self._employees.list_direct_reports(me.employee_id)
        ids.update(e.employee_id for e in direct)
        if level == L2:
            for e in direct:
                if e.management_level == L1:
                    ids.update(r.employee_id for r in self._employees.list_direct_reports(e.employee_id))
        ids.update(p.employee_id for p in self._employees.list_peers(me))
        return ids

    def is_in_reporting_chain(self, manager_id: int, employee_id: int) -> bool:
        """True if ``manager_id`` appears above ``employee_id`` in the chain."""
        seen: set[int] = set()
        current = self._employees.get_by_id(employee_id)
        while current is not None and current.reporting_manager_id is not None:
            parent_id = int(current.reporting_manager_id)
            if parent_id == int(manager_id):
                return True
            # reporting links are not cycle-checked on write
            if parent_id in seen:
                return False
            seen.add(parent_id)
            current = self._employees.get_by_id(parent_id)
        return False

    def reports_directly_to(self, manager_id: int, employee_id: int) -> bool:
        employee = self._employees.get_by_id(employee_id)
        return employee is not None and employee.reporting_manager_id is not None and int(employee.reporting_manager_id) == int(manager_id)
