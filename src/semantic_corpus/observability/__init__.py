"""
Observability Module - logging setup and OpenTelemetry tracing.

USAGE:
------
# At application startup:
from semantic_corpus.observability import configure_logging, init_tracing

configure_logging("INFO")
init_tracing()  # Installs an SDK provider if CORPUS_TRACING_ENABLED=true

# In code that needs tracing:
from semantic_corpus.observability import get_tracer

tracer = get_tracer()
with tracer.start_span("corpus.search", attributes={"corpus.search.limit": 10}) as span:
    # ... do work ...
    span.set_attribute("corpus.search.result_count", 3)
"""

from __future__ import annotations

import logging

from semantic_corpus.observability.attributes import (
    CORPUS_OPERATION,
    CORPUS_DOCUMENT_ID,
    CORPUS_DOCUMENT_COUNT,
    CORPUS_DIMENSION,
    CORPUS_CATEGORY,
    CORPUS_TEXT,
    CORPUS_SEARCH_LIMIT,
    CORPUS_SEARCH_RESULT_COUNT,
    CORPUS_SEARCH_TOP_SIMILARITY,
    CORPUS_ELAPSED_MS,
    CORPUS_ERROR_KIND,
    operation_attributes,
)
from semantic_corpus.observability.config import (
    TracingConfig,
    get_config,
    reset_config,
)
from semantic_corpus.observability.logger import configure_logging
from semantic_corpus.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)

logger = logging.getLogger(__name__)

_tracing_initialized = False


def init_tracing(config: TracingConfig | None = None) -> bool:
    """
    Initialize OpenTelemetry tracing.

    This should be called once at application startup. Spans go to an
    OTLP/HTTP endpoint when one is configured, otherwise to the console.

    Args:
        config: Optional config (uses env vars if not provided)

    Returns:
        True if tracing was initialized, False if disabled
    """
    global _tracing_initialized
    if _tracing_initialized:
        return True

    config = config or get_config()

    if not config.enabled:
        logger.debug("Tracing disabled")
        return False

    from opentelemetry import trace
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

    if config.endpoint:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        exporter = OTLPSpanExporter(endpoint=config.endpoint)
        logger.info("Tracing to OTLP endpoint: %s", config.endpoint)
    else:
        exporter = ConsoleSpanExporter()
        logger.info("Tracing to console")

    provider = TracerProvider(resource=Resource.create({"service.name": config.service_name}))
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    _tracing_initialized = True
    return True


def shutdown_tracing() -> None:
    """Flush and shut down the tracer provider."""
    global _tracing_initialized

    if not _tracing_initialized:
        return

    from opentelemetry import trace

    provider = trace.get_tracer_provider()
    if hasattr(provider, "shutdown"):
        provider.shutdown()

    reset_tracer()
    reset_config()
    _tracing_initialized = False


__all__ = [
    # Initialization
    "init_tracing",
    "shutdown_tracing",
    "configure_logging",
    # Config
    "TracingConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
    # Attributes
    "CORPUS_OPERATION",
    "CORPUS_DOCUMENT_ID",
    "CORPUS_DOCUMENT_COUNT",
    "CORPUS_DIMENSION",
    "CORPUS_CATEGORY",
    "CORPUS_TEXT",
    "CORPUS_SEARCH_LIMIT",
    "CORPUS_SEARCH_RESULT_COUNT",
    "CORPUS_SEARCH_TOP_SIMILARITY",
    "CORPUS_ELAPSED_MS",
    "CORPUS_ERROR_KIND",
    "operation_attributes",
]
