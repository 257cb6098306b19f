"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    ActivityType,
    AthleteLevel,
    MetricFamily,
    ProgramStatus,
    TaskStatus,
    UserStatus,
)
from app.domain.exceptions import (
    AggregationException,
    DashboardException,
    ResourceNotFoundException,
    StoreNotConfiguredException,
    StoreOperationException,
    ValidationException,
)

__all__ = [
    # Enums
    "ActivityType",
    "AthleteLevel",
    "MetricFamily",
    "ProgramStatus",
    "TaskStatus",
    "UserStatus",
    # Exceptions
    "AggregationException",
    "DashboardException",
    "ResourceNotFoundException",
    "StoreNotConfiguredException",
    "StoreOperationException",
    "ValidationException",
]
