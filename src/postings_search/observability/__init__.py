"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from postings_search.observability.logging import JsonFormatter, configure_logging
from postings_search.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEX_DOC_COUNT,
    INDEX_TERM_COUNT,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    get_metrics,
    init_metrics,
    track_latency,
)
from postings_search.observability.tracing import console_tracing, create_span, get_trace_context, init_tracing


__all__ = [
    "INDEX_BUILD_LATENCY",
    "INDEX_DOC_COUNT",
    "INDEX_TERM_COUNT",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "console_tracing",
    "create_span",
    "get_metrics",
    "get_trace_context",
    "init_metrics",
    "init_tracing",
    "track_latency",
]
