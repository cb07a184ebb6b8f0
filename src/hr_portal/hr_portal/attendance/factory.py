from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import FULL_DAY_MIN_HOURS, HALF_DAY_MIN_HOURS
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import CheckoutStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the checkout strategy from working hours."""

    half_day_min_hours: float = HALF_DAY_MIN_HOURS
    full_day_min_hours: float = FULL_DAY_MIN_HOURS

    def for_checkout(self, *, working_hours: float) -> CheckoutStrategy:
        if working_hours >= self.full_day_min_hours:
            return PresentStrategy()
        if working_hours >= self.half_day_min_hours:
            return HalfDayStrategy()
        return AbsentStrategy()
