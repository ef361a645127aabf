from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from cronk import Expression, Single, WeekdayConstraint

UTC = ZoneInfo("UTC")


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    # Monday
    return utc(2026, 10, 19, 12, 0)


@pytest.fixture
def friday_13th() -> Expression:
    """0 17 13 * Fri"""
    return Expression(
        minute=Single(0),
        hour=Single(17),
        dom=Single(13),
        dow=WeekdayConstraint(Single(5)),
    )
