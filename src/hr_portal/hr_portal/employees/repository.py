from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Note (DIP): services depend on this Protocol, never on MySQL directly.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(
        self,
        *,
        status: Optional[EmployeeStatus] = None,
        department_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Sequence[Employee]:
        raise NotImplementedError

    def list_direct_reports(self, manager_id: int, *, level: Optional[int] = None, active_only: bool = False) -> Sequence[Employee]:
        raise NotImplementedError

    def list_peers(self, employee: Employee) -> Sequence[Employee]:
        """Same level and same reporting manager, excluding the employee."""

        raise NotImplementedError

    def create(self, *, fields: Mapping) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, *, fields: Mapping) -> bool:
        raise NotImplementedError

    def set_status(self, employee_id: int, *, status: EmployeeStatus, is_active: bool) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def count_by_department(self, department_id: int) -> int:
        raise NotImplementedError

    def stats(self) -> dict:
        raise NotImplementedError
