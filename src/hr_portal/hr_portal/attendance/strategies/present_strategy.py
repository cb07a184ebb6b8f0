from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import CheckoutStrategy, StatusDecision


class PresentStrategy(CheckoutStrategy):
    """Full working day."""

    def decide_checkout(self, *, working_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
