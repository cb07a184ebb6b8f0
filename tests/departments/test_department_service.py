from __future__ import annotations

import pytest

from src.hr_portal.hr_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hr_portal.hr_portal.departments.model import Department
from src.hr_portal.hr_portal.departments.service import DepartmentService, clean_positions

from tests.fakes import InMemoryDepartments, InMemoryEmployees, make_employee, viewer


def _service(employees=()):
    departments = InMemoryDepartments(
        [
            Department(department_id=1, name="Management"),
            Department(department_id=2, name="Engineering", parent_department_id=1),
            Department(department_id=3, name="Backend", parent_department_id=2),
        ],
        employee_counts={2: 4},
    )
    return DepartmentService(departments, InMemoryEmployees(employees)), departments


ADMIN = viewer(make_employee(1, level=3))
SENIOR = viewer(make_employee(2, level=2))


def test_list_tree_adds_depth_and_counts():
    svc, _ = _service()
    rows = svc.list_tree()
    assert [(r["name"], r["depth"], r["childCount"], r["employeeCount"]) for r in rows] == [
        ("Management", 0, 1, 0),
        ("Engineering", 1, 1, 4),
        ("Backend", 2, 0, 0),
    ]


def test_create_requires_l3():
    svc, _ = _service()
    with pytest.raises(AuthorizationError):
        svc.create(SENIOR, {"name": "Sales"})


def test_create_rejects_unknown_parent():
    svc, _ = _service()
    with pytest.raises(ValidationError):
        svc.create(ADMIN, {"name": "Sales", "parent_department_id": 42})


def test_create_cleans_positions():
    svc, _ = _service()
    data = svc.create(ADMIN, {"name": "Sales", "positions": [" Rep ", "rep", "", "Lead"], "parent_department_id": "1"})
    assert data["positions"] == ["Rep", "Lead"]
    assert data["parent_department_id"] == 1


def test_update_refuses_descendant_as_parent():
    svc, repo = _service()
    with pytest.raises(ValidationError):
        svc.update(ADMIN, 2, {"parent_department_id": 3})
    with pytest.raises(ValidationError):
        svc.update(ADMIN, 2, {"parent_department_id": 2})
    assert repo.get_by_id(2).parent_department_id == 1


def test_update_can_move_to_root():
    svc, _ = _service()
    assert svc.update(ADMIN, 3, {"parent_department_id": None})["parent_department_id"] is None


def test_delete_blocked_by_employees_or_children():
    svc, _ = _service([make_employee(9, department_id=3)])
    with pytest.raises(ValidationError):
        svc.delete(ADMIN, 3)
    with pytest.raises(ValidationError):
        svc.delete(ADMIN, 1)


def test_delete_leaf_department():
    svc, repo = _service()
    svc.delete(ADMIN, 3)
    assert repo.get_by_id(3) is None
    with pytest.raises(NotFoundError):
        svc.get(3)


def test_parent_candidates_for_edit():
    svc, _ = _service()
    assert [d["department_id"] for d in svc.parent_candidates(2)] == [1]
    assert len(svc.parent_candidates()) == 3


def test_clean_positions_from_comma_string():
    assert clean_positions("Dev, QA ,dev") == ["Dev", "QA"]
