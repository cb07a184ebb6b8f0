from datetime import date

import pytest

from src.hr_portal.hr_portal.core.enums import LeaveType
from src.hr_portal.hr_portal.core.exceptions import ValidationError
from src.hr_portal.hr_portal.leaves.days import compute_leave_days, iter_leave_dates


def test_full_days_are_inclusive():
    assert compute_leave_days(LeaveType.CASUAL, date(2024, 3, 11), date(2024, 3, 13)) == 3.0
    assert compute_leave_days(LeaveType.SICK, date(2024, 3, 11), date(2024, 3, 11)) == 1.0


def test_half_day_is_single_date():
    assert compute_leave_days(LeaveType.HALF_DAY, date(2024, 3, 11), date(2024, 3, 11)) == 0.5
    with pytest.raises(ValidationError):
        compute_leave_days(LeaveType.HALF_DAY, date(2024, 3, 11), date(2024, 3, 12))


def test_end_before_start_rejected():
    with pytest.raises(ValidationError):
        compute_leave_days(LeaveType.CASUAL, date(2024, 3, 12), date(2024, 3, 11))


def test_iter_leave_dates_spans_month_end():
    assert list(iter_leave_dates(date(2024, 2, 28), date(2024, 3, 1))) == [
        date(2024, 2, 28),
        date(2024, 2, 29),
        date(2024, 3, 1),
    ]
