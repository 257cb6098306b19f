"""DTOs for the sports analytics charts (no dependency on the store)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class RegionalData:
    region: str
    athlete_count: int
    event_count: int


@dataclass
class LevelData:
    name: str
    value: int
    color: str


@dataclass
class GrowthData:
    """Cumulative athletes and events up to and including the month."""

    month: str
    athletes: int
    events: int


@dataclass
class AnalyticsMetrics:
    """Headline percentages for the analytics page (all 0..100 except active_programs)."""

    event_attendance_rate: int
    athletes_scouted: int
    training_completion: int
    active_programs: int


@dataclass
class SportsAnalytics:
    regional_data: list[RegionalData]
    level_data: list[LevelData]
    growth_data: list[GrowthData]
    metrics: AnalyticsMetrics
    computed_at: datetime
