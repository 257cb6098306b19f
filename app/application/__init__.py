"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements IDocumentStore (Firestore REST).
"""

from app.application.interfaces import IDocumentStore
from app.application.services.subscription_registry import SubscriptionRegistry
from app.application.use_cases import (
    DashboardService,
    ProgramService,
    ReportsService,
    SportsAnalyticsService,
)

__all__ = [
    "DashboardService",
    "IDocumentStore",
    "ProgramService",
    "ReportsService",
    "SportsAnalyticsService",
    "SubscriptionRegistry",
]
