from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum

from ._error import CronkError

# --- Field domains (inclusive) ---

MINUTE_DOMAIN = (0, 59)
HOUR_DOMAIN = (0, 23)
DOM_DOMAIN = (1, 31)
MONTH_DOMAIN = (1, 12)
DOW_DOMAIN = (0, 6)

MAX_NTH = 5


class Weekday(Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def cron_dow(self) -> int:
        """Cron DOW number: Sunday=0, Monday=1, ..., Saturday=6."""
        return _CRON_DOW[self]

    @classmethod
    def from_cron_dow(cls, n: int) -> Weekday | None:
        return _CRON_DOW_TO_WEEKDAY.get(n)

    def __str__(self) -> str:
        return self.value


_CRON_DOW = {
    Weekday.SUNDAY: 0,
    Weekday.MONDAY: 1,
    Weekday.TUESDAY: 2,
    Weekday.WEDNESDAY: 3,
    Weekday.THURSDAY: 4,
    Weekday.FRIDAY: 5,
    Weekday.SATURDAY: 6,
}

_CRON_DOW_TO_WEEKDAY = {v: k for k, v in _CRON_DOW.items()}


# --- Field specifications ---


@dataclass(frozen=True, slots=True)
class Single:
    value: int

    @property
    def seed(self) -> int:
        return self.value

    def contains(self, value: int) -> bool:
        return value == self.value


@dataclass(frozen=True, slots=True)
class Multiple:
    values: tuple[int, ...]

    def __post_init__(self) -> None:
        values = tuple(self.values)
        if not values:
            raise CronkError.field("multiple field needs at least one value")
        if any(a >= b for a, b in zip(values, values[1:])):
            raise CronkError.field(f"multiple field values must be strictly ascending: {values}")
        # frozen dataclass; normalise lists into a tuple
        object.__setattr__(self, "values", values)

    @property
    def seed(self) -> int:
        return self.values[0]

    def contains(self, value: int) -> bool:
        return value in self.values


@dataclass(frozen=True, slots=True)
class Range:
    min: int
    max: int

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise CronkError.field(f"range start {self.min} is after range end {self.max}")

    @property
    def seed(self) -> int:
        return self.min

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


Field = Single | Multiple | Range


def field_values(field: Field) -> tuple[int, ...]:
    match field:
        case Single(value=v):
            return (v,)
        case Multiple(values=vs):
            return vs
        case Range(min=lo, max=hi):
            return (lo, hi)


def check_field(field: Field, name: str, domain: tuple[int, int]) -> None:
    """Raise a field error if any value of `field` falls outside `domain`."""
    lo, hi = domain
    for v in field_values(field):
        if not lo <= v <= hi:
            raise CronkError.field(f"{name} value {v} out of range ({lo}-{hi})")


# --- Day of week ---


def cron_weekday(d: date) -> int:
    """Day of week 0-indexed from Sunday."""
    return d.isoweekday() % 7


def week_of_month(d: date) -> int:
    """1-based index of the 7-day block of the month `d` falls in."""
    return math.ceil(d.day / 7)


@dataclass(frozen=True, slots=True)
class WeekdayConstraint:
    field: Field
    nth: int | None = None

    def __post_init__(self) -> None:
        check_field(self.field, "day-of-week", DOW_DOMAIN)
        if self.nth is not None and not 1 <= self.nth <= MAX_NTH:
            raise CronkError.field(f"nth weekday must be between 1 and {MAX_NTH}, got {self.nth}")

    @classmethod
    def on(cls, *days: Weekday, nth: int | None = None) -> WeekdayConstraint:
        if not days:
            raise CronkError.field("at least one weekday is required")
        numbers = sorted({d.cron_dow for d in days})
        field: Field = Single(numbers[0]) if len(numbers) == 1 else Multiple(tuple(numbers))
        return cls(field, nth)

    def is_valid(self, d: date) -> bool:
        if not self.field.contains(cron_weekday(d)):
            return False
        return self.nth is None or self.nth == week_of_month(d)
