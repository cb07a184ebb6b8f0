from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role, kept alongside the management level."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"


class ManagementLevel(int, Enum):
    """Authority ranking: L0 employee up to L4 owner."""

    EMPLOYEE = 0
    MANAGER = 1
    SENIOR_MANAGER = 2
    ADMIN = 3
    OWNER = 4


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    ON_LEAVE = "on-leave"
    INACTIVE = "inactive"


class LeaveType(str, Enum):
    PERSONAL = "personal"
    CASUAL = "casual"
    SICK = "sick"
    UNPAID = "unpaid"
    HALF_DAY = "half-day"
    EARNED = "earned"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class LeaveStatus(str, Enum):
    """Leave approval workflow state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    ON_LEAVE = "on-leave"
    HOLIDAY = "holiday"


class AttendanceSource(str, Enum):
    MANUAL = "manual"
    LEAVE = "leave"


class AudienceType(str, Enum):
    ALL = "all"
    DEPARTMENT = "department"
    CUSTOM = "custom"


class PollStatus(str, Enum):
    ACTIVE = "active"
    SCHEDULED = "scheduled"
    ENDED = "ended"
    CLOSED = "closed"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class AssetStatus(str, Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class ResignationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class ExitProcedure(str, Enum):
    """Exit checklist items tracked for an approved resignation."""

    ASSET_RETURN = "asset_return"
    EXIT_INTERVIEW = "exit_interview"
    KNOWLEDGE_TRANSFER = "knowledge_transfer"
    CLEARANCE = "clearance"
    FINAL_SETTLEMENT = "final_settlement"


class ProcedureStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
