from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Department:
    department_id: int
    name: str
    description: Optional[str] = None
    positions: tuple[str, ...] = field(default_factory=tuple)
    parent_department_id: Optional[int] = None
    is_active: bool = True


def department_to_dict(department: Department) -> dict:
    return {
        "department_id": department.department_id,
        "name": department.name,
        "description": department.description,
        "positions": list(department.positions),
        "parent_department_id": department.parent_department_id,
        "is_active": department.is_active,
    }
