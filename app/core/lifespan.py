"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (Firestore client,
document store, subscription registry, WebSocket manager, telemetry).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: subscription registry, WebSocket manager, Firestore
    store (if configured), telemetry (if enabled). Shutdown order: live
    subscriptions, store watchers, Firestore HTTP client, telemetry.

    A document_store already present on app.state (tests) is kept as is.
    """
    settings = get_settings()

    # ---- Startup ----
    from app.api.websocket import MetricBroadcastManager
    from app.application.services.subscription_registry import SubscriptionRegistry

    app.state.subscription_registry = SubscriptionRegistry()
    app.state.ws_manager = MetricBroadcastManager()

    if getattr(app.state, "document_store", None) is None:
        from app.infrastructure.firebase import (
            FirestoreDocumentStore,
            get_firestore_client,
            init_firebase,
        )

        app.state.document_store = None
        if settings.firestore_configured and init_firebase(settings):
            app.state.document_store = FirestoreDocumentStore(
                get_firestore_client(),
                poll_interval=settings.subscription_poll_interval_seconds,
            )
            logger.info("Document store ready")
        else:
            logger.warning("Document store not configured; store-backed routes return 503")

    if settings.telemetry_enabled:
        from app.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig.from_settings(settings)
        if telemetry.setup() is not None:
            telemetry.instrument(app)
            set_telemetry(telemetry)

    yield

    # ---- Shutdown ----
    await app.state.ws_manager.close_all()
    released = app.state.subscription_registry.teardown_all()
    logger.info("Subscription registry cleared (%d released)", released)

    store = getattr(app.state, "document_store", None)
    close_store = getattr(store, "aclose", None)
    if close_store is not None:
        await close_store()

    from app.infrastructure.firebase import close_firebase

    await close_firebase()

    from app.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry flushed")
