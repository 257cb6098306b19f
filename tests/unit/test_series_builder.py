"""Daily and monthly series construction."""

import asyncio
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from app.application.services.series_builder import (
    AggregationMode,
    DayWindow,
    MonthBucket,
    SeriesMetric,
    build_daily_series,
    build_monthly_series,
    day_window,
    days_in_range,
    month_buckets,
    to_cumulative,
)

UTC = timezone.utc


def test_days_in_range_is_inclusive() -> None:
    days = days_in_range(date(2024, 2, 27), date(2024, 3, 1))
    assert days == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
    assert days_in_range(date(2024, 3, 1), date(2024, 3, 1)) == [date(2024, 3, 1)]
    assert days_in_range(date(2024, 3, 2), date(2024, 3, 1)) == []


def test_day_window_bounds_in_timezone() -> None:
    tz = ZoneInfo("Africa/Kampala")
    window = day_window(date(2024, 5, 1), tz)
    assert window.label == "2024-05-01"
    assert window.start == datetime(2024, 5, 1, 0, 0, tzinfo=tz)
    assert window.end == datetime(2024, 5, 1, 23, 59, 59, 999000, tzinfo=tz)
    # Kampala is UTC+3
    assert window.start.astimezone(UTC) == datetime(2024, 4, 30, 21, 0, tzinfo=UTC)


def test_to_cumulative_is_non_decreasing_for_counts() -> None:
    assert to_cumulative([1, 0, 2, 0, 3]) == [1, 1, 3, 3, 6]
    assert to_cumulative([]) == []


async def test_daily_series_keeps_day_order_regardless_of_completion() -> None:
    """Earlier days finish last; output is still ordered by day."""

    async def slow_early(window: DayWindow) -> int:
        await asyncio.sleep(0.01 * (5 - window.day.day))
        return window.day.day

    async def constant(window: DayWindow) -> int:
        return 1

    points = await build_daily_series(
        date(2024, 1, 1),
        date(2024, 1, 4),
        [
            SeriesMetric("day", slow_early),
            SeriesMetric("running", constant, AggregationMode.CUMULATIVE),
        ],
        UTC,
    )
    assert [p.date for p in points] == ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04"]
    assert [p.values["day"] for p in points] == [1, 2, 3, 4]
    assert [p.values["running"] for p in points] == [1, 2, 3, 4]


async def test_daily_series_issues_counts_concurrently() -> None:
    in_flight = 0
    peak = 0

    async def count(window: DayWindow) -> int:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return 0

    points = await build_daily_series(
        date(2024, 1, 1), date(2024, 1, 10), [SeriesMetric("a", count), SeriesMetric("b", count)], UTC
    )
    assert len(points) == 10
    assert peak == 20


async def test_daily_series_empty_range() -> None:
    assert await build_daily_series(date(2024, 1, 2), date(2024, 1, 1), [], UTC) == []


def test_month_buckets_cross_year_boundary() -> None:
    buckets = month_buckets(date(2024, 2, 10), 6)
    assert buckets == [
        MonthBucket(2023, 9),
        MonthBucket(2023, 10),
        MonthBucket(2023, 11),
        MonthBucket(2023, 12),
        MonthBucket(2024, 1),
        MonthBucket(2024, 2),
    ]
    assert [b.label for b in buckets] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]


def test_monthly_series_does_not_merge_years() -> None:
    buckets = month_buckets(date(2024, 2, 10), 6)
    timestamps = [
        datetime(2023, 1, 5, tzinfo=UTC),  # same month number, a year earlier: ignored
        datetime(2023, 2, 5, tzinfo=UTC),  # outside the window
        datetime(2023, 12, 31, tzinfo=UTC),
        datetime(2024, 1, 1, tzinfo=UTC),
        datetime(2024, 2, 9, tzinfo=UTC),
        None,
    ]
    assert build_monthly_series(buckets, timestamps, UTC) == [0, 0, 0, 1, 1, 1]
    assert build_monthly_series(
        buckets, timestamps, UTC, AggregationMode.CUMULATIVE
    ) == [0, 0, 0, 1, 2, 3]


def test_monthly_series_uses_reporting_timezone() -> None:
    """23:30 UTC on Jan 31 is already February in Kampala."""
    tz = ZoneInfo("Africa/Kampala")
    buckets = [MonthBucket(2024, 1), MonthBucket(2024, 2)]
    late_january = datetime(2024, 1, 31, 23, 30, tzinfo=UTC)
    assert build_monthly_series(buckets, [late_january], UTC) == [1, 0]
    assert build_monthly_series(buckets, [late_january], tz) == [0, 1]
