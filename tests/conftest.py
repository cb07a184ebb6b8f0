from __future__ import annotations

import pytest

from tests.fakes import FIXED_NOW


@pytest.fixture
def fixed_now():
    return FIXED_NOW
