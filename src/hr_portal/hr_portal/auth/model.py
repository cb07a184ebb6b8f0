from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Viewer:
    """The authenticated employee acting on a request.

    Populated once per request by the bearer-token check and read-only
    afterwards; services receive it explicitly.
    """

    employee_id: int
    full_name: str
    role: Role
    management_level: int
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    reporting_manager_id: Optional[int] = None

    @property
    def level(self) -> int:
        return int(self.management_level or 0)
