"""Application services: decoders, query policies, aggregation, series, live metrics."""

from app.application.services.live_metric import LiveMetric
from app.application.services.query_policies import (
    FirstSuccessPolicy,
    collection_count_policy,
    safe_count,
    safe_fetch_all,
)
from app.application.services.series_builder import (
    AggregationMode,
    DayWindow,
    SeriesMetric,
    SeriesPoint,
    build_daily_series,
)
from app.application.services.subscription_registry import SubscriptionRegistry

__all__ = [
    "AggregationMode",
    "DayWindow",
    "FirstSuccessPolicy",
    "LiveMetric",
    "SeriesMetric",
    "SeriesPoint",
    "SubscriptionRegistry",
    "build_daily_series",
    "collection_count_policy",
    "safe_count",
    "safe_fetch_all",
]
