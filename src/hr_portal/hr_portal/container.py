from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from .assets.mysql_asset_repository import MySQLAssetRepository
from .assets.service import AssetService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .auth.service import AuthService
from .auth.tokens import TokenSigner
from .core.constants import (
    DEFAULT_FINANCE_DEPARTMENT_NAMES,
    DEFAULT_HR_DEPARTMENT_NAMES,
    DEFAULT_PAYSLIP_STORAGE_DIR,
    DEFAULT_TOKEN_MAX_AGE_SECONDS,
)
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.service import DepartmentService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_balance_repository import MySQLLeaveBalanceRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .payslips.mysql_payslip_repository import MySQLPayslipRepository
from .payslips.service import PayslipService
from .polls.mysql_poll_repository import MySQLPollRepository
from .polls.service import PollService
from .resignations.mysql_resignation_repository import MySQLResignationRepository
from .resignations.service import ResignationService
from .team.service import TeamService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    employee_service: EmployeeService
    department_service: DepartmentService
    leave_service: LeaveService
    attendance_service: AttendanceService
    poll_service: PollService
    asset_service: AssetService
    resignation_service: ResignationService
    team_service: TeamService
    payslip_service: PayslipService


def build_services(
    *,
    employees_repo,
    departments_repo,
    leaves_repo,
    leave_balances_repo,
    attendance_repo,
    polls_repo,
    assets_repo,
    resignations_repo,
    payslips_repo,
    secret_key: str,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    finance_names: Iterable[str] = DEFAULT_FINANCE_DEPARTMENT_NAMES,
    hr_names: Iterable[str] = DEFAULT_HR_DEPARTMENT_NAMES,
    payslip_storage_dir=DEFAULT_PAYSLIP_STORAGE_DIR,
) -> Container:
    """Wire services over any set of repositories (MySQL or in-memory)."""
    finance_names = tuple(finance_names)
    hr_names = tuple(hr_names)
    tokens = TokenSigner(secret_key, max_age_seconds=token_max_age_seconds)

    return Container(
        auth_service=AuthService(employees_repo, tokens),
        employee_service=EmployeeService(employees_repo, finance_names=finance_names, hr_names=hr_names),
        department_service=DepartmentService(departments_repo, employees_repo),
        leave_service=LeaveService(
            leaves_repo,
            employees_repo,
            attendance_repo,
            leave_balances_repo,
            finance_names=finance_names,
        ),
        attendance_service=AttendanceService(
            attendance_repo,
            employees_repo,
            strategy_factory=AttendanceStrategyFactory(),
        ),
        poll_service=PollService(polls_repo),
        asset_service=AssetService(assets_repo, employees_repo),
        resignation_service=ResignationService(
            resignations_repo,
            employees_repo,
            finance_names=finance_names,
            hr_names=hr_names,
        ),
        team_service=TeamService(employees_repo, attendance_repo, leaves_repo),
        payslip_service=PayslipService(payslips_repo, employees_repo, storage_dir=payslip_storage_dir),
    )


def build_container(
    *,
    db_config: Mapping,
    secret_key: str,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    finance_names: Iterable[str] = DEFAULT_FINANCE_DEPARTMENT_NAMES,
    hr_names: Iterable[str] = DEFAULT_HR_DEPARTMENT_NAMES,
    payslip_storage_dir=DEFAULT_PAYSLIP_STORAGE_DIR,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        leave_balances_repo=MySQLLeaveBalanceRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        polls_repo=MySQLPollRepository(conn),
        assets_repo=MySQLAssetRepository(conn),
        resignations_repo=MySQLResignationRepository(conn),
        payslips_repo=MySQLPayslipRepository(conn),
        secret_key=secret_key,
        token_max_age_seconds=token_max_age_seconds,
        finance_names=finance_names,
        hr_names=hr_names,
        payslip_storage_dir=payslip_storage_dir,
    )
