"""Time-bucketed series: daily windows with concurrent counts, monthly growth buckets."""

from __future__ import annotations

import asyncio
import calendar
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum

from app.shared.utils.datetime import to_local


class AggregationMode(str, Enum):
    """How raw per-bucket counts are turned into series values."""

    PER_BUCKET = "per_bucket"
    CUMULATIVE = "cumulative"


@dataclass(frozen=True)
class DayWindow:
    """Inclusive [start, end] bounds of one calendar day in the reporting timezone."""

    day: date
    start: datetime
    end: datetime

    @property
    def label(self) -> str:
        return self.day.isoformat()


@dataclass(frozen=True)
class SeriesMetric:
    """A named per-day count; `count` is awaited once per day window."""

    name: str
    count: Callable[[DayWindow], Awaitable[int]]
    mode: AggregationMode = AggregationMode.PER_BUCKET


@dataclass
class SeriesPoint:
    date: str
    values: dict[str, int]


@dataclass(frozen=True)
class MonthBucket:
    year: int
    month: int

    @property
    def label(self) -> str:
        return calendar.month_abbr[self.month]

    def contains(self, moment: datetime) -> bool:
        return moment.year == self.year and moment.month == self.month


def days_in_range(start: date, end: date) -> list[date]:
    """Every calendar day from start to end inclusive; empty if end < start."""
    if end < start:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def day_window(day: date, tz: tzinfo) -> DayWindow:
    """Bounds 00:00:00.000 .. 23:59:59.999 of `day` in `tz`."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time(23, 59, 59, 999000), tzinfo=tz)
    return DayWindow(day=day, start=start, end=end)


def to_cumulative(values: Iterable[int]) -> list[int]:
    """Running sum; empty input gives an empty list."""
    running = 0
    result: list[int] = []
    for value in values:
        running += value
        result.append(running)
    return result


async def build_daily_series(
    range_start: date,
    range_end: date,
    metrics: Sequence[SeriesMetric],
    tz: tzinfo,
) -> list[SeriesPoint]:
    """One point per day in [range_start, range_end], one value per metric.

    Every (day, metric) count is issued in a single concurrent batch; results
    are mapped back by position, so output order never depends on completion
    order. Cumulative metrics are summed after all raw counts are known.
    """
    windows = [day_window(day, tz) for day in days_in_range(range_start, range_end)]
    if not windows:
        return []

    raw = await asyncio.gather(
        *(metric.count(window) for window in windows for metric in metrics)
    )

    width = len(metrics)
    columns: dict[str, list[int]] = {}
    for index, metric in enumerate(metrics):
        column = [int(raw[row * width + index]) for row in range(len(windows))]
        if metric.mode is AggregationMode.CUMULATIVE:
            column = to_cumulative(column)
        columns[metric.name] = column

    return [
        SeriesPoint(
            date=window.label,
            values={name: column[row] for name, column in columns.items()},
        )
        for row, window in enumerate(windows)
    ]


def month_buckets(today: date, months: int) -> list[MonthBucket]:
    """The current month and the `months - 1` before it, oldest first.

    Buckets are keyed by (year, month) so a window crossing January never
    merges two different years.
    """
    buckets: list[MonthBucket] = []
    year, month = today.year, today.month
    for _ in range(months):
        buckets.append(MonthBucket(year=year, month=month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    buckets.reverse()
    return buckets


def build_monthly_series(
    buckets: Sequence[MonthBucket],
    timestamps: Iterable[datetime | None],
    tz: tzinfo,
    mode: AggregationMode = AggregationMode.PER_BUCKET,
) -> list[int]:
    """Count timestamps per bucket (in `tz`); documents outside every bucket are ignored."""
    counts = [0] * len(buckets)
    for moment in timestamps:
        if moment is None:
            continue
        local = to_local(moment, tz)
        for index, bucket in enumerate(buckets):
            if bucket.contains(local):
                counts[index] += 1
                break
    if mode is AggregationMode.CUMULATIVE:
        return to_cumulative(counts)
    return counts
