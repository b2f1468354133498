"""OpenTelemetry tracer provider setup for fileblob.

Configuration is driven by the FILEBLOB_OTEL_* variables documented in
fileblob.config. Spans are exported over OTLP, to the console, or into an
in-memory exporter for tests. The CLI calls configure_tracing() at startup;
library users call it themselves or install their own provider.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fileblob.config import (
    FILEBLOB_OTEL_ENDPOINT_ENV,
    FILEBLOB_OTEL_EXPORTER_ENV,
    FILEBLOB_OTEL_PROTOCOL_ENV,
    FILEBLOB_OTEL_SERVICE_NAME_ENV,
    FILEBLOB_OTEL_TEST_CAPTURE_ENV,
    FILEBLOB_REQUIRE_OTEL_ENV,
    ConfigError,
    get_env_bool,
    get_env_str,
    otel_enabled,
)

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import ReadableSpan, SpanProcessor, TracerProvider
    from opentelemetry.sdk.trace.export import SpanExporter

logger = logging.getLogger(__name__)

# The global provider can be installed once per process.
_tracer_provider: TracerProvider | None = None
_test_exporter: Any = None  # InMemorySpanExporter when test capture is on


class TracingConfigError(ConfigError):
    """Raised when tracing cannot be configured and FILEBLOB_REQUIRE_OTEL=1."""

    pass


def _create_otlp_exporter(protocol: str, endpoint: str | None) -> SpanExporter:
    """Create an OTLP exporter for the "grpc" or "http" protocol."""
    kwargs: dict[str, Any] = {}
    if endpoint:
        kwargs["endpoint"] = endpoint

    if protocol == "http":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter as HTTPExporter,
        )

        return HTTPExporter(**kwargs)
    if protocol != "grpc":
        raise TracingConfigError(
            f"{FILEBLOB_OTEL_PROTOCOL_ENV} must be 'grpc' or 'http', got {protocol!r}"
        )

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
        OTLPSpanExporter as GRPCExporter,
    )

    return GRPCExporter(**kwargs)


def _create_span_processor(test_capture: bool) -> SpanProcessor:
    global _test_exporter

    from opentelemetry.sdk.trace.export import (
        BatchSpanProcessor,
        ConsoleSpanExporter,
        SimpleSpanProcessor,
    )

    if test_capture:
        from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
            InMemorySpanExporter,
        )

        _test_exporter = InMemorySpanExporter()
        return SimpleSpanProcessor(_test_exporter)

    exporter_type = get_env_str(FILEBLOB_OTEL_EXPORTER_ENV, "otlp")
    if exporter_type == "console":
        return SimpleSpanProcessor(ConsoleSpanExporter())
    if exporter_type != "otlp":
        raise TracingConfigError(
            f"{FILEBLOB_OTEL_EXPORTER_ENV} must be 'otlp' or 'console', got {exporter_type!r}"
        )

    protocol = get_env_str(FILEBLOB_OTEL_PROTOCOL_ENV, "grpc")
    endpoint = get_env_str(FILEBLOB_OTEL_ENDPOINT_ENV) or None
    return BatchSpanProcessor(_create_otlp_exporter(protocol, endpoint))


def configure_tracing() -> bool:
    """Install the fileblob tracer provider when FILEBLOB_OTEL_ENABLED is set.

    Idempotent: once a provider is installed later calls return True.

    Returns:
        True if spans are exported, False if tracing is disabled or could not
        be configured.

    Raises:
        TracingConfigError: If FILEBLOB_REQUIRE_OTEL=1 and configuration fails.
    """
    global _tracer_provider

    if not otel_enabled():
        logger.debug("OpenTelemetry tracing disabled")
        return False
    if _tracer_provider is not None:
        return True

    test_capture = get_env_bool(FILEBLOB_OTEL_TEST_CAPTURE_ENV, False)
    service_name = get_env_str(FILEBLOB_OTEL_SERVICE_NAME_ENV, "fileblob")
    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider

        processor = _create_span_processor(test_capture)
        provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
        provider.add_span_processor(processor)
        trace.set_tracer_provider(provider)
    except Exception as e:
        if get_env_bool(FILEBLOB_REQUIRE_OTEL_ENV, False):
            raise TracingConfigError(f"OpenTelemetry tracing required but failed: {e}") from e
        logger.warning("Failed to configure OpenTelemetry tracing: %s", e)
        return False

    _tracer_provider = provider
    logger.info(
        "OpenTelemetry tracing configured: service=%s, exporter=%s",
        service_name,
        "in-memory" if test_capture else get_env_str(FILEBLOB_OTEL_EXPORTER_ENV, "otlp"),
    )
    return True


def get_test_spans() -> list[ReadableSpan]:
    """Get captured spans from the in-memory exporter (for testing)."""
    if _test_exporter is not None:
        return list(_test_exporter.get_finished_spans())
    return []


def clear_test_spans() -> None:
    """Clear captured spans from the in-memory exporter (for testing)."""
    if _test_exporter is not None:
        _test_exporter.clear()


def reset_tracing() -> None:
    """Drop captured spans (for testing).

    The installed provider stays in place since the global provider cannot
    be replaced.
    """
    clear_test_spans()
