from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class CheckoutStrategy(ABC):
    """Strategy Pattern: decide the day's status from the hours worked."""

    @abstractmethod
    def decide_checkout(self, *, working_hours: float) -> StatusDecision:
        raise NotImplementedError
