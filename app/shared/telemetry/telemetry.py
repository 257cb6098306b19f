"""OpenTelemetry setup for the dashboard API.

One TelemetryConfig is built from Settings at startup. It owns the tracer
provider, instruments FastAPI, the Firestore httpx client and logging, and
flushes spans on shutdown.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Health probes and the WebSocket status poll would drown out real traffic.
_EXCLUDED_URLS = "/api/v1/health,/api/v1/ws/status"


def firestore_operation(url: Any) -> str | None:
    """Name the Firestore REST call behind a request URL.

    ``.../documents:runAggregationQuery`` -> ``runAggregationQuery``;
    plain document paths -> ``document``; other hosts -> None.
    """
    path = str(getattr(url, "path", url))
    if "/documents" not in path:
        return None
    tail = path.rsplit("/", 1)[-1]
    if ":" in tail:
        return tail.split(":", 1)[1]
    return "document"


def _tag_request(span: Any, request: Any) -> None:
    if span is None or not span.is_recording():
        return
    operation = firestore_operation(request.url)
    if operation is not None:
        span.set_attribute("firestore.operation", operation)
        span.update_name(f"firestore {operation}")


async def _tag_request_async(span: Any, request: Any) -> None:
    _tag_request(span, request)


class TelemetryConfig:
    """Tracer provider plus the instrumentations this service uses."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.exporter_type = exporter_type
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> TelemetryConfig:
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def _build_exporter(self) -> SpanExporter | None:
        if self.exporter_type == "none":
            return None
        if self.exporter_type == "otlp" and self.otlp_endpoint:
            logger.info("Exporting spans over OTLP to %s", self.otlp_endpoint)
            return OTLPSpanExporter(
                endpoint=self.otlp_endpoint,
                insecure=self.otlp_endpoint.startswith("http://"),
            )
        if self.exporter_type != "console":
            logger.warning(
                "Unknown exporter '%s' (or otlp without endpoint); using console",
                self.exporter_type,
            )
        return ConsoleSpanExporter()

    def setup(self) -> TracerProvider | None:
        """Create and register the global tracer provider.

        Failures are logged and leave tracing off; the API keeps serving.
        """
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(self.sample_rate),
            )
            exporter = self._build_exporter()
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception as e:
            logger.exception("Failed to initialize telemetry: %s", e)
            return None
        self.tracer_provider = provider
        logger.info(
            "Tracing on: service=%s version=%s exporter=%s sample_rate=%s",
            self.service_name,
            self.service_version,
            self.exporter_type,
            self.sample_rate,
        )
        return provider

    def instrument(self, app: FastAPI) -> None:
        """Instrument inbound requests, Firestore calls and log records."""
        if self.tracer_provider is None:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app,
                tracer_provider=self.tracer_provider,
                excluded_urls=_EXCLUDED_URLS,
            )
            HTTPXClientInstrumentor().instrument(
                tracer_provider=self.tracer_provider,
                request_hook=_tag_request,
                async_request_hook=_tag_request_async,
            )
            LoggingInstrumentor().instrument(
                tracer_provider=self.tracer_provider,
                set_logging_format=True,
            )
        except Exception as e:
            logger.exception("Failed to instrument application: %s", e)

    def shutdown(self) -> None:
        """Flush pending spans and release the provider."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception as e:
            logger.exception("Error during telemetry shutdown: %s", e)
        finally:
            self.tracer_provider = None


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
