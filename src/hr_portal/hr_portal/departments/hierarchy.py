"""Department tree helpers.

Departments arrive as a flat list. ``parent_department_id`` may be an int, a
numeric string, or an embedded parent (dict or object) carrying its own id;
all three are resolved the same way by ``parent_id_of``. Parents that are not
in the list make the department a root.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence


@dataclass
class HierarchyNode:
    department: Any
    depth: int = 0
    children: list["HierarchyNode"] = field(default_factory=list)


def _coerce_id(value) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        return int(value) if value.lstrip("-").isdigit() else None
    if isinstance(value, dict):
        return _coerce_id(value.get("department_id", value.get("id")))
    for attr in ("department_id", "id"):
        if hasattr(value, attr):
            return _coerce_id(getattr(value, attr))
    return None


def id_of(department) -> Optional[int]:
    return _coerce_id(department)


def parent_id_of(department) -> Optional[int]:
    if isinstance(department, dict):
        raw = department.get("parent_department_id", department.get("parent"))
    else:
        raw = getattr(department, "parent_department_id", None)
    return _coerce_id(raw)


def build_hierarchy(departments: Iterable) -> list[tuple[Any, int]]:
    """Flatten departments into depth-first pre-order ``(department, depth)`` pairs.

    Siblings keep their input order; roots have depth 0.
    """
    departments = list(departments)
    nodes: dict[int, HierarchyNode] = {}
    order: list[int] = []
    for d in departments:
        did = id_of(d)
        if did is None or did in nodes:
            continue
        nodes[did] = HierarchyNode(department=d)
        order.append(did)

    roots: list[HierarchyNode] = []
    for did in order:
        node = nodes[did]
        pid = parent_id_of(node.department)
        parent = nodes.get(pid) if pid is not None and pid != did else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)

    out: list[tuple[Any, int]] = []
    visited: set[int] = set()

    def walk(start: HierarchyNode) -> None:
        # explicit stack: parent chains can be deeper than the recursion limit
        stack = [(start, 0)]
        while stack:
            node, depth = stack.pop()
            did = id_of(node.department)
            if did in visited:
                continue
            visited.add(did)
            node.depth = depth
            out.append((node.department, depth))
            stack.extend((child, depth + 1) for child in reversed(node.children))

    for root in roots:
        walk(root)

    # Departments caught in a stored cycle are unreachable from any root.
    for did in order:
        if did not in visited:
            walk(nodes[did])
    return out


def is_invalid_parent(candidate_id, editing_id, departments: Sequence) -> bool:
    """True when ``candidate_id`` is the edited department or one of its descendants."""
    candidate = _coerce_id(candidate_id)
    editing = _coerce_id(editing_id)
    if candidate is None or editing is None:
        return False
    if candidate == editing:
        return True

    by_id = {id_of(d): d for d in departments}
    seen: set[int] = set()
    current = by_id.get(candidate)
    while current is not None:
        pid = parent_id_of(current)
        if pid is None or pid in seen:
            return False
        if pid == editing:
            return True
        seen.add(pid)
        current = by_id.get(pid)
    return False


def eligible_parents(editing_id, departments: Sequence) -> list:
    if _coerce_id(editing_id) is None:
        return list(departments)
    return [d for d in departments if not is_invalid_parent(id_of(d), editing_id, departments)]
