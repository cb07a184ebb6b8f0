"""In-memory repositories shared by the service tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from src.hr_portal.hr_portal.assets.model import Asset
from src.hr_portal.hr_portal.attendance.model import AttendanceRecord
from src.hr_portal.hr_portal.auth.service import viewer_for
from src.hr_portal.hr_portal.core.enums import (
    AssetStatus,
    AttendanceSource,
    EmployeeStatus,
    ExitProcedure,
    LeaveStatus,
    ProcedureStatus,
    ResignationStatus,
    Role,
)
from src.hr_portal.hr_portal.departments.model import Department
from src.hr_portal.hr_portal.employees.model import Employee
from src.hr_portal.hr_portal.leaves.model import Leave, LeaveBalance
from src.hr_portal.hr_portal.payslips.model import Payslip
from src.hr_portal.hr_portal.polls.model import Poll, PollOption, PollVote
from src.hr_portal.hr_portal.resignations.model import ExitProcedureItem, Resignation

FIXED_NOW = datetime(2024, 3, 13, 9, 0, 0)  # a Wednesday


def make_employee(
    employee_id: int,
    *,
    level: int = 0,
    manager_id: Optional[int] = None,
    department_id: Optional[int] = None,
    department_name: Optional[str] = None,
    role: Role = Role.EMPLOYEE,
    **extra,
) -> Employee:
    return Employee(
        employee_id=employee_id,
        employee_code=f"EMP{employee_id:03d}",
        first_name=extra.pop("first_name", f"First{employee_id}"),
        last_name=extra.pop("last_name", f"Last{employee_id}"),
        email=extra.pop("email", f"e{employee_id}@example.com"),
        password_hash=extra.pop("password_hash", "x"),
        role=role,
        management_level=level,
        department_id=department_id,
        department_name=department_name,
        reporting_manager_id=manager_id,
        **extra,
    )


def viewer(employee: Employee):
    return viewer_for(employee)


class InMemoryEmployees:
    def __init__(self, employees=()):
        self.by_id: dict[int, Employee] = {e.employee_id: e for e in employees}
        self._next_id = max(self.by_id, default=0) + 1

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.by_id.get(int(employee_id))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.by_id.values() if e.email.lower() == email.lower()), None)

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return next((e for e in self.by_id.values() if e.employee_code == employee_code), None)

    def list_all(self, *, status=None, department_id=None, search=None):
        rows = list(self.by_id.values())
        if status is not None:
            rows = [e for e in rows if e.status == status]
        if department_id is not None:
            rows = [e for e in rows if e.department_id == department_id]
        if search:
            needle = search.lower()
            rows = [e for e in rows if needle in e.full_name.lower() or needle in e.email.lower()]
        return rows

    def list_direct_reports(self, manager_id: int, *, level=None, active_only=False):
        rows = [e for e in self.by_id.values() if e.reporting_manager_id == manager_id]
        if level is not None:
            rows = [e for e in rows if e.management_level == level]
        if active_only:
            rows = [e for e in rows if e.is_active]
        return rows

    def list_peers(self, employee: Employee):
        return [
            e for e in self.by_id.values()
            if e.employee_id != employee.employee_id
            and e.management_level == employee.management_level
            and e.reporting_manager_id == employee.reporting_manager_id
        ]

    def create(self, *, fields) -> int:
        new_id = self._next_id
        self._next_id += 1
        self.by_id[new_id] = Employee(employee_id=new_id, **dict(fields))
        return new_id

    def update(self, employee_id: int, *, fields) -> bool:
        if employee_id not in self.by_id:
            return False
        self.by_id[employee_id] = replace(self.by_id[employee_id], **dict(fields))
        return True

    def set_status(self, employee_id: int, *, status: EmployeeStatus, is_active: bool) -> bool:
        return self.update(employee_id, fields={"status": status, "is_active": is_active})

    def delete_by_id(self, employee_id: int) -> bool:
        return self.by_id.pop(employee_id, None) is not None

    def count_by_department(self, department_id: int) -> int:
        return sum(1 for e in self.by_id.values() if e.department_id == department_id)

    def stats(self) -> dict:
        rows = list(self.by_id.values())
        return {
            "total": len(rows),
            "active": sum(1 for e in rows if e.status == EmployeeStatus.ACTIVE),
            "inactive": sum(1 for e in rows if e.status == EmployeeStatus.INACTIVE),
            "on_leave": sum(1 for e in rows if e.status == EmployeeStatus.ON_LEAVE),
            "by_department": [],
            "by_role": [],
        }


class InMemoryDepartments:
    def __init__(self, departments=(), employee_counts=None):
        self.by_id: dict[int, Department] = {d.department_id: d for d in departments}
        self.counts = dict(employee_counts or {})
        self._next_id = max(self.by_id, default=0) + 1

    def list_all(self):
        return list(self.by_id.values())

    def get_by_id(self, department_id: int):
        return self.by_id.get(int(department_id))

    def get_by_name(self, name: str):
        return next((d for d in self.by_id.values() if d.name.lower() == name.lower()), None)

    def create(self, *, name, description, positions, parent_department_id) -> int:
        new_id = self._next_id
        self._next_id += 1
        self.by_id[new_id] = Department(
            department_id=new_id,
            name=name,
            description=description,
            positions=tuple(positions),
            parent_department_id=parent_department_id,
        )
        return new_id

    def update(self, department_id, *, name, description, positions, parent_department_id, is_active) -> bool:
        self.by_id[department_id] = replace(
            self.by_id[department_id],
            name=name,
            description=description,
            positions=tuple(positions),
            parent_department_id=parent_department_id,
            is_active=is_active,
        )
        return True

    def delete_by_id(self, department_id: int) -> bool:
        return self.by_id.pop(department_id, None) is not None

    def employee_counts(self):
        return dict(self.counts)


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[int, AttendanceRecord] = {}
        self._next_id = 1

    def get_by_id(self, attendance_id: int):
        return self.rows.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id, work_date):
        return next((r for r in self.rows.values() if r.employee_id == employee_id and r.work_date == work_date), None)

    def list_records(self, *, employee_ids=None, start_date=None, end_date=None, limit=None):
        rows = list(self.rows.values())
        if employee_ids is not None:
            ids = set(employee_ids)
            rows = [r for r in rows if r.employee_id in ids]
        if start_date:
            rows = [r for r in rows if r.work_date >= start_date]
        if end_date:
            rows = [r for r in rows if r.work_date <= end_date]
        rows.sort(key=lambda r: r.work_date, reverse=True)
        return rows[:limit] if limit else rows

    def _insert(self, record: AttendanceRecord) -> int:
        self.rows[record.attendance_id] = record
        self._next_id = max(self._next_id, record.attendance_id + 1)
        return record.attendance_id

    def create_checkin(self, *, employee_id, work_date, check_in, status) -> int:
        return self._insert(
            AttendanceRecord(
                attendance_id=self._next_id,
                employee_id=employee_id,
                work_date=work_date,
                check_in=check_in,
                check_out=None,
                status=status,
            )
        )

    def complete_checkin(self, *, attendance_id, check_in, status) -> bool:
        self.rows[attendance_id] = replace(self.rows[attendance_id], check_in=check_in, status=status, source=AttendanceSource.MANUAL)
        return True

    def update_checkout(self, *, attendance_id, check_out, status, working_hours, notes=None) -> bool:
        current = self.rows[attendance_id]
        self.rows[attendance_id] = replace(
            current, check_out=check_out, status=status, working_hours=working_hours, notes=notes or current.notes
        )
        return True

    def update_record(self, *, attendance_id, check_in, check_out, status, working_hours, notes=None) -> bool:
        self.rows[attendance_id] = replace(
            self.rows[attendance_id],
            check_in=check_in,
            check_out=check_out,
            status=status,
            working_hours=working_hours,
            notes=notes,
        )
        return True

    def upsert_day(self, *, employee_id, work_date, status, source, notes=None) -> None:
        existing = self.get_for_employee_and_date(employee_id, work_date)
        if existing:
            self.rows[existing.attendance_id] = replace(existing, status=status, source=source, notes=notes)
            return
        self._insert(
            AttendanceRecord(
                attendance_id=self._next_id,
                employee_id=employee_id,
                work_date=work_date,
                check_in=None,
                check_out=None,
                status=status,
                source=source,
                notes=notes,
            )
        )


class InMemoryLeaves:
    def __init__(self, leaves=()):
        self.by_id: dict[int, Leave] = {l.leave_id: l for l in leaves}
        self._next_id = max(self.by_id, default=0) + 1

    def create(self, *, employee_id, leave_type, start_date, end_date, days, reason) -> int:
        new_id = self._next_id
        self._next_id += 1
        self.by_id[new_id] = Leave(
            leave_id=new_id,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            reason=reason,
        )
        return new_id

    def get_by_id(self, leave_id):
        return self.by_id.get(int(leave_id))

    def list_leaves(self, *, employee_ids=None, status=None, limit=200):
        rows = list(self.by_id.values())
        if employee_ids is not None:
            ids = set(employee_ids)
            rows = [l for l in rows if l.employee_id in ids]
        if status is not None:
            rows = [l for l in rows if l.status == status]
        return rows[:limit]

    def decide(self, leave_id, *, status, approved_by, remarks) -> bool:
        leave = self.by_id.get(leave_id)
        if not leave or leave.status != LeaveStatus.PENDING:
            return False
        self.by_id[leave_id] = replace(leave, status=status, approved_by=approved_by, remarks=remarks, approval_date=FIXED_NOW)
        return True

    def delete_pending(self, leave_id) -> bool:
        leave = self.by_id.get(leave_id)
        if not leave or leave.status != LeaveStatus.PENDING:
            return False
        del self.by_id[leave_id]
        return True


class InMemoryLeaveBalances:
    def __init__(self, balances=()):
        self.by_employee: dict[int, LeaveBalance] = {b.employee_id: b for b in balances}

    def get(self, employee_id):
        return self.by_employee.get(int(employee_id))

    def credit_month(self, employee_id, *, month, allocation) -> None:
        current = self.by_employee.get(employee_id) or LeaveBalance(employee_id=employee_id)
        if current.month == month:
            return
        self.by_employee[employee_id] = replace(
            current,
            personal=current.personal + allocation.get("personal", 0),
            sick=current.sick + allocation.get("sick", 0),
            casual=current.casual + allocation.get("casual", 0),
            month=month,
        )

    def adjust(self, employee_id, *, leave_type, delta) -> bool:
        current = self.by_employee.get(employee_id)
        if current is None:
            return False
        value = getattr(current, leave_type.value) + delta
        if value < 0:
            return False
        self.by_employee[employee_id] = replace(current, **{leave_type.value: value})
        return True

    def set_values(self, employee_id, *, values) -> bool:
        if employee_id not in self.by_employee:
            return False
        self.by_employee[employee_id] = replace(self.by_employee[employee_id], **dict(values))
        return True


class InMemoryPayslips:
    def __init__(self):
        self.by_id: dict[int, Payslip] = {}
        self._next_id = 1

    def get_by_id(self, payslip_id):
        return self.by_id.get(int(payslip_id))

    def list_payslips(self, *, employee_id=None, month=None, year=None):
        rows = [
            p for p in self.by_id.values()
            if (employee_id is None or p.employee_id == employee_id)
            and (month is None or p.month == month)
            and (year is None or p.year == year)
        ]
        return sorted(rows, key=lambda p: (p.year, p.month), reverse=True)

    def upsert(self, *, employee_id, month, year, file_name, file_path, file_size, uploaded_by, remarks) -> int:
        existing = next(
            (p for p in self.by_id.values() if (p.employee_id, p.month, p.year) == (employee_id, month, year)),
            None,
        )
        payslip_id = existing.payslip_id if existing else self._next_id
        if not existing:
            self._next_id += 1
        self.by_id[payslip_id] = Payslip(
            payslip_id=payslip_id,
            employee_id=employee_id,
            month=month,
            year=year,
            file_name=file_name,
            file_path=file_path,
            file_size=file_size,
            uploaded_by=uploaded_by,
            uploaded_at=FIXED_NOW,
            remarks=remarks,
        )
        return payslip_id


class InMemoryPolls:
    def __init__(self, polls=()):
        self.by_id: dict[int, Poll] = {p.poll_id: p for p in polls}
        self._next_poll = max(self.by_id, default=0) + 1
        self._next_option = 1000
        self.upserts = 0

    def _options(self, labels):
        out = []
        for position, label in enumerate(labels):
            self._next_option += 1
            out.append(PollOption(option_id=self._next_option, label=label, sort_order=position))
        return tuple(out)

    def list_all(self):
        return list(self.by_id.values())

    def get_by_id(self, poll_id):
        return self.by_id.get(int(poll_id))

    def create(self, *, title, description, options, allow_custom_option, audience, created_by, start_date, end_date) -> int:
        poll_id = self._next_poll
        self._next_poll += 1
        self.by_id[poll_id] = Poll(
            poll_id=poll_id,
            title=title,
            description=description,
            options=self._options(options),
            allow_custom_option=allow_custom_option,
            audience=audience,
            created_by=created_by,
            start_date=start_date,
            end_date=end_date,
        )
        return poll_id

    def update(self, poll_id, *, title, description, allow_custom_option, is_active, start_date, end_date, options=None, audience=None) -> bool:
        poll = self.by_id[poll_id]
        changes = dict(
            title=title,
            description=description,
            allow_custom_option=allow_custom_option,
            is_active=is_active,
            start_date=start_date,
            end_date=end_date,
        )
        if options is not None:
            changes["options"] = self._options(options)
        if audience is not None:
            changes["audience"] = audience
        self.by_id[poll_id] = replace(poll, **changes)
        return True

    def delete_by_id(self, poll_id) -> bool:
        return self.by_id.pop(poll_id, None) is not None

    def upsert_vote(self, poll_id, *, employee_id, option_id, custom_text) -> None:
        self.upserts += 1
        poll = self.by_id[poll_id]
        votes = [v for v in poll.votes if v.employee_id != employee_id]
        votes.append(PollVote(employee_id=employee_id, option_id=option_id, custom_text=custom_text, voted_at=FIXED_NOW))
        self.by_id[poll_id] = replace(poll, votes=tuple(votes))


class InMemoryAssets:
    def __init__(self):
        self.by_id: dict[int, Asset] = {}
        self._next_id = 1

    def get_by_id(self, asset_id):
        return self.by_id.get(int(asset_id))

    def list_assets(self, *, employee_ids=None):
        rows = list(self.by_id.values())
        if employee_ids is not None:
            ids = set(employee_ids)
            rows = [a for a in rows if a.employee_id in ids]
        return rows

    def allocate(self, *, employee_id, name, allocated_by) -> int:
        asset_id = self._next_id
        self._next_id += 1
        self.by_id[asset_id] = Asset(asset_id=asset_id, employee_id=employee_id, name=name, allocated_by=allocated_by, allocated_at=FIXED_NOW)
        return asset_id

    def revoke(self, asset_id, *, revoked_by) -> bool:
        asset = self.by_id.get(asset_id)
        if not asset or asset.status != AssetStatus.ACTIVE:
            return False
        self.by_id[asset_id] = replace(asset, status=AssetStatus.REVOKED, revoked_by=revoked_by, revoked_at=FIXED_NOW)
        return True


class InMemoryResignations:
    def __init__(self):
        self.by_id: dict[int, Resignation] = {}
        self._next_id = 1

    def get_by_id(self, resignation_id):
        return self.by_id.get(int(resignation_id))

    def list_resignations(self, *, employee_id=None):
        rows = list(self.by_id.values())
        if employee_id is not None:
            rows = [r for r in rows if r.employee_id == employee_id]
        return rows

    def find_open(self, employee_id):
        return next(
            (
                r for r in self.by_id.values()
                if r.employee_id == employee_id and r.status in (ResignationStatus.PENDING, ResignationStatus.APPROVED)
            ),
            None,
        )

    def create(self, *, employee_id, resignation_date, last_working_date, reason) -> int:
        resignation_id = self._next_id
        self._next_id += 1
        self.by_id[resignation_id] = Resignation(
            resignation_id=resignation_id,
            employee_id=employee_id,
            resignation_date=resignation_date,
            last_working_date=last_working_date,
            reason=reason,
            procedures=tuple(ExitProcedureItem(procedure_type=kind) for kind in ExitProcedure),
        )
        return resignation_id

    def decide(self, resignation_id, *, status, approved_by, remarks) -> bool:
        current = self.by_id[resignation_id]
        if current.status != ResignationStatus.PENDING:
            return False
        self.by_id[resignation_id] = replace(current, status=status, approved_by=approved_by, approval_remarks=remarks)
        return True

    def set_status(self, resignation_id, *, status) -> bool:
        self.by_id[resignation_id] = replace(self.by_id[resignation_id], status=status)
        return True

    def update_procedure(self, resignation_id, *, procedure, status, completed_by, remarks) -> bool:
        current = self.by_id[resignation_id]
        items = [p for p in current.procedures if p.procedure_type != procedure]
        items.append(
            ExitProcedureItem(
                procedure_type=procedure,
                status=status,
                completed_by=completed_by,
                completed_at=FIXED_NOW if status == ProcedureStatus.COMPLETED else None,
                remarks=remarks,
            )
        )
        self.by_id[resignation_id] = replace(current, procedures=tuple(items))
        return True

    def update_last_working_date(self, resignation_id, *, last_working_date) -> bool:
        self.by_id[resignation_id] = replace(self.by_id[resignation_id], last_working_date=last_working_date)
        return True
