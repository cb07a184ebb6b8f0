from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from werkzeug.utils import secure_filename

from ..auth.model import Viewer
from ..common.datetime_utils import now_local
from ..common.validators import optional_int
from ..core.constants import MAX_PAYSLIP_BYTES
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..permissions import policy
from .model import Payslip, payslip_to_dict
from .repository import PayslipRepository

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


def _month(value) -> Optional[int]:
    month = optional_int(value, "Month")
    if month is not None and not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    return month


def _year(value) -> Optional[int]:
    year = optional_int(value, "Year")
    if year is not None and not 1970 <= year <= 9999:
        raise ValidationError("Year is out of range")
    return year


def stored_file_name(original: Optional[str], now: datetime) -> str:
    """``<sanitised stem>_<epoch millis>.pdf``; uploads of the same name never collide."""
    stem = Path(secure_filename(original or "")).stem or "payslip"
    return f"{stem}_{int(now.timestamp() * 1000)}.pdf"


class PayslipService:
    """Payslip PDFs: L3 and above upload and see everyone's, employees see their own."""

    def __init__(self, payslips: PayslipRepository, employees: EmployeeRepository, *, storage_dir):
        self._payslips = payslips
        self._employees = employees
        self._storage_dir = Path(storage_dir)

    def list_for_viewer(self, viewer: Viewer, *, employee_id=None, month=None, year=None) -> list[dict]:
        if policy.can_view_payslips_of_others(viewer.level):
            target = optional_int(employee_id, "Employee")
        else:
            target = viewer.employee_id
        rows = self._payslips.list_payslips(employee_id=target, month=_month(month), year=_year(year))
        return [payslip_to_dict(p) for p in rows]

    def upload(
        self,
        viewer: Viewer,
        *,
        employee_id,
        month,
        year,
        file_name: Optional[str],
        content: Optional[bytes],
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        if not policy.can_view_payslips_of_others(viewer.level):
            raise AuthorizationError("Only L3 and above can upload payslips")

        target_id = optional_int(employee_id, "Employee")
        month_v = _month(month)
        year_v = _year(year)
        if target_id is None or month_v is None or year_v is None:
            raise ValidationError("Employee, month and year are required")
        if not content:
            raise ValidationError("Payslip PDF is required")
        if len(content) > MAX_PAYSLIP_BYTES:
            raise ValidationError(f"Payslip must be at most {MAX_PAYSLIP_BYTES // (1024 * 1024)} MB")
        if not content.startswith(PDF_MAGIC):
            raise ValidationError("Only PDF files are allowed")

        employee = self._employees.get_by_id(target_id)
        if not employee:
            raise NotFoundError("Employee not found")

        period_dir = (
            self._storage_dir
            / (secure_filename(employee.employee_code) or str(employee.employee_id))
            / f"{year_v:04d}_{month_v:02d}"
        )
        period_dir.mkdir(parents=True, exist_ok=True)
        destination = period_dir / stored_file_name(file_name, now or now_local())
        destination.write_bytes(content)

        payslip_id = self._payslips.upsert(
            employee_id=employee.employee_id,
            month=month_v,
            year=year_v,
            file_name=destination.name,
            file_path=str(destination),
            file_size=len(content),
            uploaded_by=viewer.employee_id,
            remarks=(remarks or "").strip() or None,
        )
        logger.info(
            "Payslip %s for employee %s (%04d-%02d) uploaded by %s",
            payslip_id, employee.employee_id, year_v, month_v, viewer.employee_id,
        )
        return payslip_to_dict(self._payslips.get_by_id(payslip_id))

    def open_for_download(self, viewer: Viewer, payslip_id: int) -> tuple[Path, Payslip, bool]:
        """Return (path, payslip, as_attachment); L3+ download, owners view inline."""
        payslip = self._payslips.get_by_id(int(payslip_id))
        if not payslip:
            raise NotFoundError("Payslip not found")

        is_owner = payslip.employee_id == viewer.employee_id
        is_finance = policy.can_view_payslips_of_others(viewer.level)
        if not is_owner and not is_finance:
            raise AuthorizationError("Access denied")

        path = Path(payslip.file_path)
        if not path.is_file():
            raise NotFoundError("Payslip file missing from server")
        return path, payslip, is_finance
