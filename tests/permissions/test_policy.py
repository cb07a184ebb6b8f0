from __future__ import annotations

import pytest

from src.hr_portal.hr_portal.auth.model import Viewer
from src.hr_portal.hr_portal.core.enums import Role
from src.hr_portal.hr_portal.permissions import policy


def _viewer(level: int, department_name=None, role=Role.EMPLOYEE) -> Viewer:
    return Viewer(employee_id=1, full_name="V", role=role, management_level=level, department_name=department_name)


@pytest.mark.parametrize(
    "viewer_level,requester_level,own,expected",
    [
        (1, 0, False, True),
        (1, 1, False, False),
        (2, 1, False, True),
        (2, 2, False, False),
        (3, 2, False, True),
        (3, 3, False, False),
        (4, 4, False, True),
        (0, 0, False, False),
        (4, 0, True, False),
    ],
)
def test_can_approve_leave_ladder(viewer_level, requester_level, own, expected):
    assert policy.can_approve_leave(viewer_level, requester_level, own) is expected


def test_l2_edits_only_juniors_and_never_self():
    assert policy.can_edit_employee_record(2, 1, False)
    assert not policy.can_edit_employee_record(2, 2, False)
    assert not policy.can_edit_employee_record(2, 0, True)


def test_l3_and_l4_edit_anyone():
    assert policy.can_edit_employee_record(3, 4, False)
    assert policy.can_edit_employee_record(4, 4, True)
    assert not policy.can_edit_employee_record(1, 0, False)


@pytest.mark.parametrize(
    "viewer_level,level,expected",
    [
        (2, 0, True),
        (2, 1, True),
        (2, 2, False),
        (2, 4, False),
        (3, 2, True),
        (3, 3, False),
        (4, 4, True),
        (1, 0, False),
    ],
)
def test_assignable_levels_are_strictly_junior(viewer_level, level, expected):
    assert policy.can_assign_level(viewer_level, level) is expected


def test_role_changes_need_l3():
    assert not policy.can_change_role(2)
    assert policy.can_change_role(3)


def test_delete_and_status_ladders():
    assert policy.can_delete_employee(4, 4)
    assert policy.can_delete_employee(3, 3)
    assert not policy.can_delete_employee(3, 4)
    assert not policy.can_delete_employee(2, 0)

    assert policy.can_manage_status(3, 2)
    assert not policy.can_manage_status(3, 3)
    assert policy.can_manage_status(4, 3)


def test_level_thresholds():
    assert not policy.can_manage_employees(1)
    assert policy.can_manage_employees(2)
    assert not policy.can_manage_departments(2)
    assert policy.can_manage_departments(3)
    assert policy.can_manage_polls(3)


def test_sensitive_data_is_l4_or_finance_l3():
    assert policy.can_view_sensitive_data(_viewer(4))
    assert policy.can_view_sensitive_data(_viewer(3, " Finance "))
    assert not policy.can_view_sensitive_data(_viewer(3, "Engineering"))
    assert not policy.can_view_sensitive_data(_viewer(2, "Finance"))
    assert not policy.can_view_sensitive_data(None)


def test_finance_names_are_configurable():
    v = _viewer(3, "Accounts")
    assert not policy.is_finance_l3(v)
    assert policy.is_finance_l3(v, finance_names=("accounts",))


def test_hr_user_by_role_or_department():
    assert policy.is_hr_department_user(_viewer(0, role=Role.HR))
    assert policy.is_hr_department_user(_viewer(0, "Human Resources"))
    assert not policy.is_hr_department_user(_viewer(4, "Management"))


def test_normalize_department_name_accepts_several_shapes():
    class Dept:
        name = "  Finance"

    assert policy.normalize_department_name("FINANCE ") == "finance"
    assert policy.normalize_department_name({"name": "Finance"}) == "finance"
    assert policy.normalize_department_name(Dept()) == "finance"
    assert policy.normalize_department_name(None) == ""


def test_exit_date_update_rights():
    assert policy.can_update_exit_date(_viewer(4))
    assert policy.can_update_exit_date(_viewer(3, "finance"))
    assert policy.can_update_exit_date(_viewer(3, "hr"))
    assert not policy.can_update_exit_date(_viewer(3, "engineering"))
    assert not policy.can_update_exit_date(_viewer(2, "hr"))


def test_assets_and_poll_results():
    assert policy.can_manage_assets(3, 10, None)
    assert policy.can_manage_assets(1, 10, 10)
    assert not policy.can_manage_assets(2, 10, 11)

    assert policy.can_see_poll_results(0, 5, 5)
    assert policy.can_see_poll_results(4, 1, 5)
    assert not policy.can_see_poll_results(3, 1, 5)


def test_garbage_levels_are_treated_as_l0():
    assert not policy.can_manage_employees("abc")
    assert not policy.can_approve_leave(None, 0, False)
