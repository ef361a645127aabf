from __future__ import annotations

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from cronk import (
    CronkError,
    Expression,
    Multiple,
    Range,
    Schedule,
    SearchLimits,
    Single,
    WeekdayConstraint,
)

from tests.conftest import utc

# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"minute": Single(60)}, "minute value 60"),
            ({"hour": Range(0, 24)}, "hour value 24"),
            ({"dom": Single(0)}, "day-of-month value 0"),
            ({"month": Multiple((0, 1))}, "month value 0"),
            ({"month": Single(13)}, "month value 13"),
        ],
    )
    def test_out_of_range(self, kwargs: dict[str, object], message: str) -> None:
        with pytest.raises(CronkError, match=message) as exc_info:
            Expression(**kwargs)  # type: ignore[arg-type]
        assert exc_info.value.kind == "field"

    def test_full_domains_accepted(self) -> None:
        Expression(
            minute=Range(0, 59),
            hour=Range(0, 23),
            dom=Range(1, 31),
            month=Range(1, 12),
            dow=WeekdayConstraint(Range(0, 6)),
        )

    @pytest.mark.parametrize("kwargs", [{"max_years": 0}, {"max_attempts": 0}])
    def test_invalid_limits(self, kwargs: dict[str, int]) -> None:
        with pytest.raises(CronkError) as exc_info:
            SearchLimits(**kwargs)
        assert exc_info.value.kind == "field"


# =============================================================================
# Cron rendering
# =============================================================================


class TestToCron:
    def test_unconstrained(self) -> None:
        assert Expression().to_cron() == "* * * * *"

    def test_friday_13th(self, friday_13th: Expression) -> None:
        assert friday_13th.to_cron() == "0 17 13 * 5"
        assert str(friday_13th) == "0 17 13 * 5"

    def test_lists_and_ranges(self) -> None:
        expr = Expression(
            minute=Multiple((0, 30)),
            hour=Range(9, 17),
            month=Multiple((1, 7)),
            dow=WeekdayConstraint(Range(1, 5)),
        )
        assert expr.to_cron() == "0,30 9-17 * 1,7 1-5"

    def test_degenerate_range(self) -> None:
        assert Expression(hour=Range(4, 4)).to_cron() == "* 4 * * *"

    def test_nth(self) -> None:
        expr = Expression(minute=Single(0), hour=Single(9), dow=WeekdayConstraint(Single(1), nth=2))
        assert expr.to_cron() == "0 9 * * 1#2"


# =============================================================================
# Matching
# =============================================================================


class TestMatches:
    def test_friday_13th(self, friday_13th: Expression) -> None:
        assert friday_13th.matches(utc(2026, 11, 13, 17, 0))
        assert not friday_13th.matches(utc(2026, 11, 13, 17, 1))
        assert not friday_13th.matches(utc(2026, 11, 13, 18, 0))
        # Tuesday
        assert not friday_13th.matches(utc(2026, 10, 13, 17, 0))

    def test_unconstrained_matches_everything(self) -> None:
        assert Expression().matches(utc(2026, 2, 28, 23, 59))

    def test_nth(self) -> None:
        expr = Expression(dow=WeekdayConstraint(Single(1), nth=2))
        assert expr.matches(utc(2026, 11, 9, 8, 0))
        assert not expr.matches(utc(2026, 11, 16, 8, 0))


# =============================================================================
# Seeding
# =============================================================================


class TestIntoSchedule:
    def test_returns_schedule(self, friday_13th: Expression, now: datetime) -> None:
        schedule = friday_13th.into_schedule(now)
        assert isinstance(schedule, Schedule)
        assert schedule.reference == now
        assert schedule.limits == SearchLimits()

    def test_reference_truncated_to_minute(self) -> None:
        schedule = Expression().into_schedule(utc(2026, 10, 19, 10, 30, 59))
        assert schedule.reference == utc(2026, 10, 19, 10, 30)

    def test_custom_limits(self, friday_13th: Expression, now: datetime) -> None:
        limits = SearchLimits(max_years=5)
        assert friday_13th.into_schedule(now, limits).limits is limits

    def test_expression_is_reusable(self, friday_13th: Expression, now: datetime) -> None:
        first = friday_13th.into_schedule(now)
        second = friday_13th.into_schedule(now)
        assert first.next_n(3) == second.next_n(3)

    def test_schedules_are_independent(self, friday_13th: Expression, now: datetime) -> None:
        first = friday_13th.into_schedule(now)
        second = friday_13th.into_schedule(now)
        first.next_n(5)
        assert second.next() == utc(2026, 11, 13, 17, 0)

    def test_defaults_to_local_now(self) -> None:
        before = datetime.now().astimezone().replace(second=0, microsecond=0)
        result = Expression().into_schedule().next()
        assert result.tzinfo is not None
        assert result >= before

    def test_default_clock_follows_local_zone_rules(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cronk._expression.get_localzone_name", lambda: "America/New_York")
        expr = Expression(minute=Single(0), hour=Single(17), dom=Single(13))
        results = expr.into_schedule().next_n(12)
        assert all(r.tzinfo == ZoneInfo("America/New_York") for r in results)
        assert all((r.hour, r.minute) == (17, 0) for r in results)
        # A year of monthly occurrences spans both sides of a DST change
        assert {r.utcoffset() for r in results} == {timedelta(hours=-4), timedelta(hours=-5)}

    def test_default_clock_without_configured_zone(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cronk._expression.get_localzone_name", lambda: None)
        assert Expression().into_schedule().next().tzinfo == ZoneInfo("UTC")

    def test_seeding_logs_under_expression_logger(
        self, friday_13th: Expression, now: datetime, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="cronk")
        friday_13th.into_schedule(now).next()
        names = {r.name for r in caplog.records}
        assert names == {"cronk.expression", "cronk.schedule"}
        assert any("0 17 13 * 5" in r.getMessage() for r in caplog.records if r.name == "cronk.expression")

    def test_naive_reference(self) -> None:
        result = Expression(minute=Single(30)).into_schedule(datetime(2026, 10, 19, 10, 45)).next()
        assert result == datetime(2026, 10, 19, 11, 30)
        assert result.tzinfo is None
