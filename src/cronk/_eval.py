from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo

from ._ast import WeekdayConstraint
from ._error import CronkError
from ._ticker import Ticker

logger = logging.getLogger("cronk.schedule")

# =============================================================================
# Search Limits
# =============================================================================
# The ripple carry walks candidates one tick at a time and has no notion of
# "impossible": an expression such as 31 February never produces a valid
# calendar date. Each next() call is therefore bounded.
#
# - max_years (50): the candidate year may run at most this many years past
#   the year the call started from. The rarest satisfiable constraints (a
#   fifth weekday of February, a weekday-pinned 29 February) recur within
#   28 years, so the default leaves room to spare.
# - max_attempts (unlimited): optional cap on candidates examined per call,
#   for callers that need a CPU bound rather than a calendar one.
# =============================================================================

DEFAULT_MAX_YEARS = 50

# =============================================================================
# DST (Daylight Saving Time) Handling
# =============================================================================
# Candidates are wall-clock times in the reference moment's tzinfo.
#
# 1. DST Gap (Spring Forward): the wall time does not exist. The candidate
#    is treated like a non-existent date and the search moves on, so a daily
#    02:30 does not fire on that day. Gap times are not pushed forward: the
#    shifted time (02:30 -> 03:30) would break the minute/hour fields and
#    could repeat an occurrence the expression produces at 03:30 anyway.
# 2. DST Fold (Fall Back): the wall time occurs twice. The first occurrence
#    (fold=0) is used, and the time fires once.
#
# Naive reference moments produce naive occurrences and skip both checks.
# Ordering uses instants, not wall clocks: aware datetimes sharing a tzinfo
# compare by wall time and ignore fold, which misorders the repeated hour.
# =============================================================================


@dataclass(frozen=True, slots=True)
class SearchLimits:
    max_years: int = DEFAULT_MAX_YEARS
    max_attempts: int | None = None

    def __post_init__(self) -> None:
        if self.max_years < 1:
            raise CronkError.field(f"max_years must be at least 1, got {self.max_years}")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise CronkError.field(f"max_attempts must be at least 1, got {self.max_attempts}")


@dataclass(slots=True)
class CandidateDateTime:
    """A date-time under construction; it may not exist on the calendar."""

    minute: int
    hour: int
    day: int
    month: int
    year: int

    def date(self) -> date | None:
        try:
            return date(self.year, self.month, self.day)
        except ValueError:
            return None


# --- Helpers ---


def _at_time_on_date(d: date, hour: int, minute: int, tz: tzinfo | None) -> datetime | None:
    naive = datetime.combine(d, time(hour, minute))
    if tz is None:
        return naive
    # fold=0 picks the first of two ambiguous wall times
    aware = naive.replace(tzinfo=tz, fold=0)
    # Wall times inside a spring-forward gap do not survive a UTC round-trip
    normalized = datetime.fromtimestamp(aware.timestamp(), tz=tz)
    if normalized.replace(tzinfo=None) != naive:
        return None
    return aware


def _earlier(a: datetime, b: datetime) -> bool:
    if a.tzinfo is None:
        return a < b
    return a.timestamp() < b.timestamp()


# --- Schedule ---


class Schedule:
    """Stateful generator of occurrences for a seeded expression.

    Every call to `next` moves the candidate forward; there is no way back.
    A Schedule is not safe for concurrent use: give each consumer its own.
    """

    def __init__(
        self,
        current: CandidateDateTime,
        minute: Ticker,
        hour: Ticker,
        dom: Ticker,
        month: Ticker,
        dow: WeekdayConstraint | None,
        reference: datetime,
        limits: SearchLimits | None = None,
    ) -> None:
        self._current = current
        self._minute = minute
        self._hour = hour
        self._dom = dom
        self._month = month
        self._dow = dow
        self._not_before = reference.replace(second=0, microsecond=0)
        self._tz = reference.tzinfo
        self._limits = limits or SearchLimits()
        self._last: datetime | None = None
        self._pending: datetime | None = None
        self._unexamined = True

    @property
    def reference(self) -> datetime:
        return self._not_before

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    def next(self) -> datetime:
        """Return the next occurrence and advance past it.

        Raises CronkError (kind "search") when nothing matches within the
        configured SearchLimits. The schedule stays usable after such an
        error and resumes from where the failed search stopped.
        """
        if self._pending is not None:
            result, self._pending = self._pending, None
            return result
        return self._search()

    def peek(self) -> datetime:
        """Return the next occurrence without consuming it."""
        if self._pending is None:
            self._pending = self._search()
        return self._pending

    def next_n(self, n: int) -> list[datetime]:
        return [self.next() for _ in range(n)]

    def between(self, to: datetime) -> Iterator[datetime]:
        """Yield occurrences up to and including `to`.

        The first occurrence after `to` is left pending, so the schedule
        resumes with it.
        """
        while not _earlier(to, self.peek()):
            yield self.next()

    def __iter__(self) -> Iterator[datetime]:
        return self

    def __next__(self) -> datetime:
        return self.next()

    def __repr__(self) -> str:
        c = self._current
        return (
            f"Schedule(candidate={c.year:04d}-{c.month:02d}-{c.day:02d} "
            f"{c.hour:02d}:{c.minute:02d}, reference={self._not_before.isoformat()})"
        )

    # --- Search loop ---

    def _search(self) -> datetime:
        origin_year = self._current.year
        max_years = self._limits.max_years
        max_attempts = self._limits.max_attempts
        attempts = 0

        while True:
            attempts += 1
            if max_attempts is not None and attempts > max_attempts:
                logger.warning("no occurrence within %d attempts", max_attempts)
                raise CronkError.search(f"no occurrence found within {max_attempts} attempts")

            if self._unexamined:
                # Seeded or resumed candidate: examine it before moving on
                self._unexamined = False
            else:
                self._increment()
                if self._current.year - origin_year > max_years:
                    # Resume from this candidate on the next call
                    self._unexamined = True
                    logger.warning("no occurrence within %d years of %d", max_years, origin_year)
                    raise CronkError.search(
                        f"no occurrence found within {max_years} years of {origin_year}"
                    )

            candidate = self._accept()
            if candidate is not None:
                self._last = candidate
                logger.debug("next occurrence %s after %d attempts", candidate, attempts)
                return candidate

    def _accept(self) -> datetime | None:
        d = self._current.date()
        if d is None:
            return None
        if self._dow is not None and not self._dow.is_valid(d):
            return None
        candidate = _at_time_on_date(d, self._current.hour, self._current.minute, self._tz)
        if candidate is None or _earlier(candidate, self._not_before):
            return None
        if self._last is not None and not _earlier(self._last, candidate):
            return None
        return candidate

    # --- Ripple carry ---

    def _increment(self) -> None:
        c = self._current
        c.minute, carry = self._minute.tick()
        if not carry:
            return
        c.hour, carry = self._hour.tick()
        if not carry:
            return
        c.day, carry = self._dom.tick()
        if not carry:
            return
        c.month, carry = self._month.tick()
        if not carry:
            return
        c.year += 1
