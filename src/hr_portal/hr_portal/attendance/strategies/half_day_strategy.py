from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import CheckoutStrategy, StatusDecision


class HalfDayStrategy(CheckoutStrategy):
    def decide_checkout(self, *, working_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY, note=f"Half day ({working_hours:.2f}h worked)")
