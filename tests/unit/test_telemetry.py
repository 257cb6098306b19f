"""Span decorator and Firestore request naming."""

import httpx
import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from app.core.config import Settings
from app.shared.telemetry import TelemetryConfig, traced
from app.shared.telemetry.telemetry import firestore_operation


@pytest.fixture
def exporter(monkeypatch: pytest.MonkeyPatch) -> InMemorySpanExporter:
    memory = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(memory))
    monkeypatch.setattr(trace, "get_tracer", lambda name, *a, **kw: provider.get_tracer(name))
    return memory


async def test_traced_records_kwargs_and_result_size(exporter: InMemorySpanExporter) -> None:
    @traced("programs.list_programs")
    async def list_programs(limit: int, token: str) -> list[int]:
        return [1, 2, 3]

    assert await list_programs(limit=3, token="secret") == [1, 2, 3]

    (span,) = exporter.get_finished_spans()
    assert span.name == "programs.list_programs"
    assert span.attributes["arg.limit"] == "3"
    assert "arg.token" not in span.attributes
    assert span.attributes["result.size"] == 3
    assert span.status.status_code is StatusCode.OK


def test_traced_marks_errors_and_reraises(exporter: InMemorySpanExporter) -> None:
    @traced()
    def explode(program_id: str) -> None:
        raise ValueError("boom")

    with pytest.raises(ValueError):
        explode(program_id="p1")

    (span,) = exporter.get_finished_spans()
    assert span.name.endswith("explode")
    assert span.attributes["arg.program_id"] == "p1"
    assert span.status.status_code is StatusCode.ERROR
    assert span.events[0].name == "exception"


def test_firestore_operation_names() -> None:
    base = "https://firestore.googleapis.com/v1/projects/p/databases/(default)/documents"
    assert firestore_operation(httpx.URL(f"{base}:runAggregationQuery")) == "runAggregationQuery"
    assert firestore_operation(httpx.URL(f"{base}/programs:runQuery")) == "runQuery"
    assert firestore_operation(httpx.URL(f"{base}/programs/p1")) == "document"
    assert firestore_operation(httpx.URL("https://oauth2.googleapis.com/token")) is None


def test_config_from_settings() -> None:
    settings = Settings(
        _env_file=None,
        telemetry_exporter="none",
        telemetry_sample_rate=0.25,
        telemetry_environment="staging",
    )
    config = TelemetryConfig.from_settings(settings)
    assert config.exporter_type == "none"
    assert config.sample_rate == 0.25
    assert config.environment == "staging"
    assert config.service_name == settings.app_name
