from __future__ import annotations

from src.hr_portal.hr_portal.departments.hierarchy import build_hierarchy, eligible_parents, is_invalid_parent
from src.hr_portal.hr_portal.departments.model import Department


def _dept(did, name, parent=None):
    return Department(department_id=did, name=name, parent_department_id=parent)


DEPARTMENTS = [
    _dept(1, "Management"),
    _dept(2, "Engineering", 1),
    _dept(3, "Backend", 2),
    _dept(4, "Frontend", 2),
    _dept(5, "Finance", 1),
]


def test_build_hierarchy_is_preorder_with_depth():
    flat = [(d.name, depth) for d, depth in build_hierarchy(DEPARTMENTS)]
    assert flat == [
        ("Management", 0),
        ("Engineering", 1),
        ("Backend", 2),
        ("Frontend", 2),
        ("Finance", 1),
    ]


def test_orphans_become_roots():
    flat = [(d.name, depth) for d, depth in build_hierarchy([_dept(7, "Lost", 99), _dept(8, "Child", 7)])]
    assert flat == [("Lost", 0), ("Child", 1)]


def test_parent_ids_resolved_uniformly_from_dicts():
    rows = [
        {"department_id": 1, "name": "A"},
        {"department_id": 2, "name": "B", "parent_department_id": "1"},
        {"department_id": 3, "name": "C", "parent_department_id": {"department_id": 2}},
    ]
    assert [(d["name"], depth) for d, depth in build_hierarchy(rows)] == [("A", 0), ("B", 1), ("C", 2)]


def test_stored_cycle_does_not_hang():
    rows = [_dept(1, "A", 2), _dept(2, "B", 1)]
    names = sorted(d.name for d, _ in build_hierarchy(rows))
    assert names == ["A", "B"]


def test_self_and_descendants_are_invalid_parents():
    assert is_invalid_parent(2, 2, DEPARTMENTS)
    assert is_invalid_parent(3, 2, DEPARTMENTS)
    assert not is_invalid_parent(5, 2, DEPARTMENTS)
    assert not is_invalid_parent(1, 2, DEPARTMENTS)


def test_invalid_parent_walk_stops_on_cycle():
    rows = [_dept(1, "A", 2), _dept(2, "B", 1), _dept(3, "C")]
    assert not is_invalid_parent(1, 3, rows)


def test_eligible_parents_excludes_subtree():
    assert [d.department_id for d in eligible_parents(2, DEPARTMENTS)] == [1, 5]
    assert len(eligible_parents(None, DEPARTMENTS)) == len(DEPARTMENTS)


def test_plain_id_and_parent_keys():
    rows = [
        {"id": 1, "name": "Eng", "parent": None},
        {"id": 2, "name": "Backend", "parent": 1},
        {"id": 3, "name": "Frontend", "parent": 1},
    ]
    assert [{"id": d["id"], "depth": depth} for d, depth in build_hierarchy(rows)] == [
        {"id": 1, "depth": 0},
        {"id": 2, "depth": 1},
        {"id": 3, "depth": 1},
    ]
    assert is_invalid_parent(2, 1, rows)
    assert [d["id"] for d in eligible_parents(2, rows)] == [1, 3]


def test_deep_parent_chain_is_flattened_iteratively():
    depth = 3000
    rows = [_dept(1, "D1")] + [_dept(i, f"D{i}", i - 1) for i in range(2, depth + 1)]
    flat = build_hierarchy(rows)

    assert len(flat) == depth
    assert flat[-1][0].department_id == depth
    assert flat[-1][1] == depth - 1
