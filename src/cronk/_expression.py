from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from tzlocal import get_localzone_name

from ._ast import (
    DOM_DOMAIN,
    HOUR_DOMAIN,
    MINUTE_DOMAIN,
    MONTH_DOMAIN,
    Field,
    WeekdayConstraint,
    check_field,
)
from ._cron import to_cron
from ._eval import CandidateDateTime, Schedule, SearchLimits
from ._ticker import RangeTicker, Ticker, into_ticker

logger = logging.getLogger("cronk.expression")


def _local_zone() -> tzinfo:
    """The system time zone, defaulting to UTC when none is configured."""
    name = get_localzone_name()
    return ZoneInfo(name) if name else ZoneInfo("UTC")


def _seed(field: Field | None, now_value: int, domain: tuple[int, int]) -> tuple[int, Ticker]:
    if field is not None:
        return field.seed, into_ticker(field)
    # Unconstrained: full domain, cursor parked on "now" so nothing earlier is produced.
    # This holds even when a larger field jumps ahead: month=11 seeded on 19 October
    # starts at 19 November, not 1 November.
    lo, hi = domain
    return now_value, RangeTicker(lo, hi, now_value)


@dataclass(frozen=True, slots=True)
class Expression:
    """Declarative recurrence: one optional field per time unit.

    Fields left as None follow the reference moment ("every minute",
    "every hour", ...). `dom` is the day of the month; `dow` restricts the
    day of the week and may pin the Nth such weekday of the month.
    """

    minute: Field | None = None
    hour: Field | None = None
    dom: Field | None = None
    month: Field | None = None
    dow: WeekdayConstraint | None = None

    def __post_init__(self) -> None:
        for name, field, domain in (
            ("minute", self.minute, MINUTE_DOMAIN),
            ("hour", self.hour, HOUR_DOMAIN),
            ("day-of-month", self.dom, DOM_DOMAIN),
            ("month", self.month, MONTH_DOMAIN),
        ):
            if field is not None:
                check_field(field, name, domain)

    def into_schedule(
        self, now: datetime | None = None, limits: SearchLimits | None = None
    ) -> Schedule:
        """Seed a Schedule at `now` (read from the local clock when omitted).

        The first occurrence is never earlier than `now`. Occurrences carry
        `now`'s tzinfo, or are naive when `now` is.
        """
        if now is None:
            now = datetime.now(_local_zone())

        minute, minute_ticker = _seed(self.minute, now.minute, MINUTE_DOMAIN)
        hour, hour_ticker = _seed(self.hour, now.hour, HOUR_DOMAIN)
        day, dom_ticker = _seed(self.dom, now.day, DOM_DOMAIN)
        month, month_ticker = _seed(self.month, now.month, MONTH_DOMAIN)

        current = CandidateDateTime(minute=minute, hour=hour, day=day, month=month, year=now.year)
        logger.debug("seeded %r at %s", self.to_cron(), now.isoformat())

        return Schedule(
            current,
            minute_ticker,
            hour_ticker,
            dom_ticker,
            month_ticker,
            self.dow,
            now,
            limits,
        )

    def matches(self, dt: datetime) -> bool:
        """Whether `dt`, taken to the minute, satisfies every field."""
        for field, value in (
            (self.minute, dt.minute),
            (self.hour, dt.hour),
            (self.dom, dt.day),
            (self.month, dt.month),
        ):
            if field is not None and not field.contains(value):
                return False
        return self.dow is None or self.dow.is_valid(dt.date())

    def to_cron(self) -> str:
        return to_cron(self)

    def __str__(self) -> str:
        return self.to_cron()
