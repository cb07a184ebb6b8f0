"""Authorization policy keyed on management level (L0-L4).

Every function here is pure and never raises: a denied action simply returns
False. Services translate a denial into ``AuthorizationError``.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..core.constants import DEFAULT_FINANCE_DEPARTMENT_NAMES, DEFAULT_HR_DEPARTMENT_NAMES
from ..core.enums import ManagementLevel, Role

L0 = ManagementLevel.EMPLOYEE.value
L1 = ManagementLevel.MANAGER.value
L2 = ManagementLevel.SENIOR_MANAGER.value
L3 = ManagementLevel.ADMIN.value
L4 = ManagementLevel.OWNER.value


def _level(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def normalize_department_name(department) -> str:
    """Lower-cased department name from a string, dict, or object with ``name``."""
    if not department:
        return ""
    if isinstance(department, str):
        return department.strip().lower()
    if isinstance(department, dict):
        name = department.get("name") or department.get("department_name") or ""
        return str(name).strip().lower()
    name = getattr(department, "name", None) or getattr(department, "department_name", None)
    return str(name).strip().lower() if name else ""


def _names(values: Iterable[str]) -> set[str]:
    return {v.strip().lower() for v in values if v and v.strip()}


def can_manage_employees(level) -> bool:
    return _level(level) >= L2


def can_manage_departments(level) -> bool:
    return _level(level) >= L3


def can_manage_polls(level) -> bool:
    return _level(level) >= L3


def can_approve_leave(viewer_level, requester_level, is_own_request: bool) -> bool:
    """Approvers act only on strictly junior levels; L4 approves everyone."""
    if is_own_request:
        return False

    viewer_level = _level(viewer_level)
    requester_level = _level(requester_level)

    if viewer_level >= L4:
        return True
    if viewer_level == L3:
        return requester_level < L3
    if viewer_level == L2:
        return requester_level < L2
    if viewer_level == L1:
        return requester_level == L0
    return False


def can_edit_employee_record(viewer_level, target_level, is_self: bool) -> bool:
    viewer_level = _level(viewer_level)
    if viewer_level >= L3:
        return True
    if viewer_level == L2:
        return _level(target_level) < L2 and not is_self
    return False


def can_assign_level(viewer_level, level) -> bool:
    """Levels a viewer may hand out on create or update: strictly below their own."""
    viewer_level = _level(viewer_level)
    if viewer_level >= L4:
        return True
    if viewer_level in (L2, L3):
        return _level(level) < viewer_level
    return False


def can_change_role(viewer_level) -> bool:
    return _level(viewer_level) >= L3


def can_delete_employee(viewer_level, target_level) -> bool:
    viewer_level = _level(viewer_level)
    if viewer_level >= L4:
        return True
    if viewer_level == L3:
        return _level(target_level) < L4
    return False


def can_manage_status(viewer_level, target_level) -> bool:
    viewer_level = _level(viewer_level)
    if viewer_level >= L4:
        return True
    if viewer_level == L3:
        return _level(target_level) < L3
    return False


def can_process_resignation(viewer_level, target_level) -> bool:
    # Same ladder as status management: L3 handles L0-L2, L4 handles everyone.
    return can_manage_status(viewer_level, target_level)


def is_finance_l3(viewer, *, finance_names: Iterable[str] = DEFAULT_FINANCE_DEPARTMENT_NAMES) -> bool:
    if viewer is None or _level(getattr(viewer, "management_level", 0)) != L3:
        return False
    name = normalize_department_name(getattr(viewer, "department_name", None))
    return bool(name) and name in _names(finance_names)


def is_hr_department_user(viewer, *, hr_names: Iterable[str] = DEFAULT_HR_DEPARTMENT_NAMES) -> bool:
    if viewer is None:
        return False
    role = getattr(viewer, "role", None)
    if role == Role.HR or role == Role.HR.value:
        return True
    name = normalize_department_name(getattr(viewer, "department_name", None))
    return bool(name) and name in _names(hr_names)


def can_view_sensitive_data(viewer, *, finance_names: Iterable[str] = DEFAULT_FINANCE_DEPARTMENT_NAMES) -> bool:
    """Salary, bank and compliance fields: L4, or L3 in a finance department."""
    if viewer is None:
        return False
    if _level(getattr(viewer, "management_level", 0)) >= L4:
        return True
    return is_finance_l3(viewer, finance_names=finance_names)


def can_adjust_leave_balance(viewer, *, finance_names: Iterable[str] = DEFAULT_FINANCE_DEPARTMENT_NAMES) -> bool:
    # Same gate as sensitive data: finance L3 or L4.
    return can_view_sensitive_data(viewer, finance_names=finance_names)


def can_view_payslips_of_others(viewer_level) -> bool:
    return _level(viewer_level) >= L3


def can_update_exit_date(
    viewer,
    *,
    finance_names: Iterable[str] = DEFAULT_FINANCE_DEPARTMENT_NAMES,
    hr_names: Iterable[str] = DEFAULT_HR_DEPARTMENT_NAMES,
) -> bool:
    if viewer is None:
        return False
    level = _level(getattr(viewer, "management_level", 0))
    if level >= L4:
        return True
    if level != L3:
        return False
    return is_finance_l3(viewer, finance_names=finance_names) or is_hr_department_user(viewer, hr_names=hr_names)


def can_manage_assets(viewer_level, viewer_id, target_reporting_manager_id: Optional[int]) -> bool:
    """Admins manage anyone's assets; otherwise only the target's reporting manager."""
    if _level(viewer_level) >= L3:
        return True
    return target_reporting_manager_id is not None and int(target_reporting_manager_id) == int(viewer_id)


def can_see_poll_results(viewer_level, viewer_id, poll_creator_id) -> bool:
    return _level(viewer_level) >= L4 or int(viewer_id) == int(poll_creator_id)
