from __future__ import annotations

from ._ast import (
    Field,
    Multiple,
    Range,
    Single,
    Weekday,
    WeekdayConstraint,
)
from ._error import CronkError, CronkErrorKind
from ._eval import DEFAULT_MAX_YEARS, Schedule, SearchLimits
from ._expression import Expression

__all__ = [
    "Expression",
    "Schedule",
    "SearchLimits",
    "DEFAULT_MAX_YEARS",
    "CronkError",
    "CronkErrorKind",
    "Field",
    "Single",
    "Multiple",
    "Range",
    "Weekday",
    "WeekdayConstraint",
]
