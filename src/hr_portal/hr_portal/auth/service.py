from __future__ import annotations

import logging

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import EmployeeStatus
from ..core.exceptions import AuthenticationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import Viewer
from .tokens import TokenSigner

logger = logging.getLogger(__name__)


def viewer_for(employee: Employee) -> Viewer:
    return Viewer(
        employee_id=employee.employee_id,
        full_name=employee.full_name,
        role=employee.role,
        management_level=employee.management_level,
        department_id=employee.department_id,
        department_name=employee.department_name,
        reporting_manager_id=employee.reporting_manager_id,
    )


class AuthService:
    """Use case: authenticate an employee and resolve bearer tokens."""

    def __init__(self, employees: EmployeeRepository, tokens: TokenSigner):
        self._employees = employees
        self._tokens = tokens

    def login(self, identifier: str, password: str) -> tuple[str, Employee]:
        """Accepts either the email address or the employee code."""
        identifier = require_non_empty(identifier, "Email or Employee ID")
        password = password or ""

        if "@" in identifier:
            employee = self._employees.get_by_email(identifier.lower())
        else:
            employee = self._employees.get_by_code(identifier)

        if not employee or not employee.is_active or employee.status == EmployeeStatus.INACTIVE:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(employee.password_hash, password)
        except ValueError:
            # placeholder or corrupted hash values
            ok = False
        if not ok:
            logger.info("Failed login for %s", identifier)
            raise AuthenticationError("Invalid credentials")

        logger.info("Employee %s logged in", employee.employee_id)
        return self._tokens.issue(employee.employee_id), employee

    def resolve(self, token: str) -> Viewer:
        employee_id = self._tokens.verify(token)
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise AuthenticationError("Account is no longer active")
        return viewer_for(employee)
