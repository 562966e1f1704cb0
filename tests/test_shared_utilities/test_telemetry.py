"""
Tests for OpenTelemetry instrumentation utilities.
"""

import pytest
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)
from opentelemetry.trace import StatusCode

from src.shared_utilities.telemetry import TelemetryManager


@pytest.fixture
def traced():
    """Telemetry manager whose finished spans are kept in memory."""
    manager = TelemetryManager(service_name="test")
    exporter = InMemorySpanExporter()
    manager.tracer_provider.add_span_processor(SimpleSpanProcessor(exporter))
    return manager, exporter


class TestTraceOperation:
    def test_successful_operation(self, traced):
        manager, exporter = traced

        with manager.trace_operation("export_revision", {"commit": "abc"}):
            pass

        (span,) = exporter.get_finished_spans()
        assert span.name == "export_revision"
        assert span.attributes["commit"] == "abc"
        assert span.status.status_code is not StatusCode.ERROR

    def test_failed_operation_marks_span_as_error(self, traced):
        manager, exporter = traced

        with pytest.raises(ValueError):
            with manager.trace_operation("resolve_paths"):
                raise ValueError("bad diff")

        (span,) = exporter.get_finished_spans()
        assert span.status.status_code is StatusCode.ERROR
        assert "bad diff" in span.status.description
        assert any(event.name == "exception" for event in span.events)


class TestTraceFunction:
    def test_records_duration(self, traced):
        manager, exporter = traced

        @manager.trace_function("extract_file_history")
        def extract():
            return 3

        assert extract() == 3
        (span,) = exporter.get_finished_spans()
        assert "duration_seconds" in span.attributes

    def test_failed_call_marks_span_as_error(self, traced):
        manager, exporter = traced

        @manager.trace_function("extract_file_history")
        def extract():
            raise RuntimeError("git failed")

        with pytest.raises(RuntimeError):
            extract()

        (span,) = exporter.get_finished_spans()
        assert span.status.status_code is StatusCode.ERROR
        assert any(event.name == "exception" for event in span.events)

    def test_disabled_manager_returns_function_unchanged(self):
        manager = TelemetryManager(enabled=False)

        def extract():
            return 1

        assert manager.trace_function("x")(extract) is extract
