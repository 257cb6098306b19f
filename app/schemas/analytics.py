"""Sports analytics API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RegionalDataItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    region: str
    athlete_count: int
    event_count: int


class LevelDataItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    value: int
    color: str


class GrowthDataItem(BaseModel):
    """Cumulative counts up to and including the month."""

    model_config = ConfigDict(from_attributes=True)

    month: str
    athletes: int
    events: int


class AnalyticsMetricsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_attendance_rate: int
    athletes_scouted: int
    training_completion: int
    active_programs: int


class SportsAnalyticsResponse(BaseModel):
    """All analytics page charts in one response."""

    model_config = ConfigDict(from_attributes=True)

    regional_data: list[RegionalDataItem]
    level_data: list[LevelDataItem]
    growth_data: list[GrowthDataItem]
    metrics: AnalyticsMetricsResponse
    computed_at: datetime
