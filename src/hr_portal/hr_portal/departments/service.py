from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..auth.model import Viewer
from ..common.validators import optional_int, require_non_empty
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..permissions import policy
from .hierarchy import build_hierarchy, eligible_parents, is_invalid_parent
from .model import Department, department_to_dict
from .repository import DepartmentRepository

logger = logging.getLogger(__name__)


def clean_positions(values) -> list[str]:
    """Trimmed, non-empty positions; duplicates dropped case-insensitively."""
    if values is None:
        return []
    if isinstance(values, str):
        values = values.split(",")
    out: list[str] = []
    seen: set[str] = set()
    for v in values:
        text = str(v or "").strip()
        if text and text.lower() not in seen:
            seen.add(text.lower())
            out.append(text)
    return out


class DepartmentService:
    """Use cases: department tree and department maintenance."""

    def __init__(self, departments: DepartmentRepository, employees: EmployeeRepository):
        self._departments = departments
        self._employees = employees

    def _require(self, department_id: int) -> Department:
        department = self._departments.get_by_id(int(department_id))
        if not department:
            raise NotFoundError("Department not found")
        return department

    def _require_manager(self, viewer: Viewer) -> None:
        if not policy.can_manage_departments(viewer.level):
            raise AuthorizationError("Only L3 and above can manage departments")

    def list_tree(self) -> list[dict]:
        departments = list(self._departments.list_all())
        counts = self._departments.employee_counts()
        child_counts: dict[int, int] = {}
        for d in departments:
            if d.parent_department_id is not None:
                pid = int(d.parent_department_id)
                child_counts[pid] = child_counts.get(pid, 0) + 1

        out = []
        for department, depth in build_hierarchy(departments):
            row = department_to_dict(department)
            row["depth"] = depth
            row["childCount"] = child_counts.get(department.department_id, 0)
            row["employeeCount"] = counts.get(department.department_id, 0)
            out.append(row)
        return out

    def get(self, department_id: int) -> dict:
        return department_to_dict(self._require(department_id))

    def parent_candidates(self, editing_id: Optional[int] = None) -> list[dict]:
        departments = list(self._departments.list_all())
        return [department_to_dict(d) for d in eligible_parents(editing_id, departments)]

    def _check_parent(self, parent_id: Optional[int], editing_id: Optional[int]) -> None:
        if parent_id is None:
            return
        departments = list(self._departments.list_all())
        if not any(d.department_id == parent_id for d in departments):
            raise ValidationError("Parent department not found")
        if editing_id is not None and is_invalid_parent(parent_id, editing_id, departments):
            raise ValidationError("A department cannot be placed under itself or one of its sub-departments")

    def create(self, viewer: Viewer, data: Mapping) -> dict:
        self._require_manager(viewer)
        name = require_non_empty(data.get("name"), "Department name")
        parent_id = optional_int(data.get("parent_department_id"), "Parent department")
        if self._departments.get_by_name(name):
            raise ValidationError("Department already exists")
        self._check_parent(parent_id, None)

        new_id = self._departments.create(
            name=name,
            description=(data.get("description") or "").strip() or None,
            positions=clean_positions(data.get("positions")),
            parent_department_id=parent_id,
        )
        logger.info("Department %s (%s) created by %s", new_id, name, viewer.employee_id)
        return department_to_dict(self._require(new_id))

    def update(self, viewer: Viewer, department_id: int, data: Mapping) -> dict:
        self._require_manager(viewer)
        current = self._require(department_id)

        name = require_non_empty(data.get("name", current.name), "Department name")
        if name.lower() != current.name.lower():
            other = self._departments.get_by_name(name)
            if other and other.department_id != current.department_id:
                raise ValidationError("Department already exists")

        if "parent_department_id" in data:
            parent_id = optional_int(data.get("parent_department_id"), "Parent department")
        else:
            parent_id = current.parent_department_id
        self._check_parent(parent_id, current.department_id)

        positions = clean_positions(data["positions"]) if "positions" in data else list(current.positions)
        description = data.get("description", current.description)
        self._departments.update(
            current.department_id,
            name=name,
            description=(description or "").strip() or None,
            positions=positions,
            parent_department_id=parent_id,
            is_active=bool(data.get("is_active", current.is_active)),
        )
        logger.info("Department %s updated by %s", current.department_id, viewer.employee_id)
        return department_to_dict(self._require(current.department_id))

    def delete(self, viewer: Viewer, department_id: int) -> None:
        self._require_manager(viewer)
        current = self._require(department_id)

        assigned = self._employees.count_by_department(current.department_id)
        if assigned:
            raise ValidationError(f"Cannot delete department with {assigned} assigned employee(s)")
        children = [d for d in self._departments.list_all() if d.parent_department_id == current.department_id]
        if children:
            raise ValidationError(f"Cannot delete department with {len(children)} sub-department(s)")

        self._departments.delete_by_id(current.department_id)
        logger.info("Department %s deleted by %s", current.department_id, viewer.employee_id)
