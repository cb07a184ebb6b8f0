from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import CheckoutStrategy, StatusDecision


class AbsentStrategy(CheckoutStrategy):
    """Too few hours to count as a working day."""

    def decide_checkout(self, *, working_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT, note=f"Insufficient hours ({working_hours:.2f}h worked)")
