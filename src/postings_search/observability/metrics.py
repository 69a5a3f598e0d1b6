"""Prometheus metrics for index builds and searches, mirrored to OpenTelemetry."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING, Any

from opentelemetry import metrics as otel_metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


_meter_holder: dict[str, Any] = {"meter": None, "provider": None}


def init_metrics(
    service_name: str = "postings-search",
    resource_attributes: dict[str, str] | None = None,
) -> MeterProvider:
    """Initialize the OpenTelemetry meter provider once."""
    provider = _meter_holder.get("provider")
    if isinstance(provider, MeterProvider):
        return provider

    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    provider = MeterProvider(resource=Resource.create(attributes))
    otel_metrics.set_meter_provider(provider)
    _meter_holder["provider"] = provider
    _meter_holder["meter"] = otel_metrics.get_meter(__name__)
    return provider


def _get_meter():
    meter = _meter_holder.get("meter")
    if meter is None:
        # No provider configured: the API hands back a no-op meter.
        meter = otel_metrics.get_meter(__name__)
        _meter_holder["meter"] = meter
    return meter


class _BoundMetric:
    def __init__(self, wrapper: MetricBridge, labels: dict[str, str]) -> None:
        self._wrapper = wrapper
        self._labels = labels

    def inc(self, amount: float = 1.0) -> None:
        self._wrapper.inc(self._labels, amount)

    def observe(self, value: float) -> None:
        self._wrapper.observe(self._labels, value)

    def set(self, value: float) -> None:
        self._wrapper.set(self._labels, value)


class MetricBridge:
    """Bridge a Prometheus metric to a lazily created OTel instrument."""

    def __init__(
        self,
        prom_metric: Counter | Histogram | Gauge,
        *,
        otel_name: str,
        otel_description: str,
        otel_kind: str,
    ) -> None:
        self._prom_metric = prom_metric
        self._otel_name = otel_name
        self._otel_description = otel_description
        self._otel_kind = otel_kind
        self._otel_instrument = None
        self._last_values: dict[tuple[tuple[str, str], ...], float] = {}

    def labels(self, **labels: str) -> _BoundMetric:
        return _BoundMetric(self, labels)

    def _ensure_otel_instrument(self):
        if self._otel_instrument is not None:
            return self._otel_instrument
        meter = _get_meter()
        if self._otel_kind == "counter":
            self._otel_instrument = meter.create_counter(self._otel_name, description=self._otel_description)
        elif self._otel_kind == "histogram":
            self._otel_instrument = meter.create_histogram(self._otel_name, description=self._otel_description)
        elif self._otel_kind == "gauge":
            self._otel_instrument = meter.create_up_down_counter(self._otel_name, description=self._otel_description)
        else:
            raise ValueError(f"Unknown metric kind: {self._otel_kind}")
        return self._otel_instrument

    def inc(self, labels: dict[str, str], amount: float) -> None:
        self._prom_metric.labels(**labels).inc(amount)
        self._ensure_otel_instrument().add(amount, labels)

    def observe(self, labels: dict[str, str], value: float) -> None:
        self._prom_metric.labels(**labels).observe(value)
        self._ensure_otel_instrument().record(value, labels)

    def set(self, labels: dict[str, str], value: float) -> None:
        self._prom_metric.labels(**labels).set(value)
        key = tuple(sorted(labels.items()))
        delta = value - self._last_values.get(key, 0.0)
        if delta:
            self._ensure_otel_instrument().add(delta, labels)
        self._last_values[key] = value


_INDEX_BUILD_LATENCY_PROM = Histogram(
    "postings_search_index_build_seconds",
    "Inverted index build latency in seconds",
    ["analyzer"],
    buckets=(0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0),
)

_INDEX_DOC_COUNT_PROM = Gauge(
    "postings_search_index_documents",
    "Documents in the most recently built index",
    ["analyzer"],
)

_INDEX_TERM_COUNT_PROM = Gauge(
    "postings_search_index_terms",
    "Distinct terms in the most recently built index",
    ["analyzer"],
)

_SEARCH_LATENCY_PROM = Histogram(
    "postings_search_query_seconds",
    "AND query evaluation latency in seconds",
    ["policy"],
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
)

_SEARCH_COUNT_PROM = Counter(
    "postings_search_queries_total",
    "Evaluated AND queries",
    ["policy", "outcome"],
)

INDEX_BUILD_LATENCY = MetricBridge(
    _INDEX_BUILD_LATENCY_PROM,
    otel_name="postings_search_index_build_seconds",
    otel_description="Inverted index build latency in seconds",
    otel_kind="histogram",
)

INDEX_DOC_COUNT = MetricBridge(
    _INDEX_DOC_COUNT_PROM,
    otel_name="postings_search_index_documents",
    otel_description="Documents in the most recently built index",
    otel_kind="gauge",
)

INDEX_TERM_COUNT = MetricBridge(
    _INDEX_TERM_COUNT_PROM,
    otel_name="postings_search_index_terms",
    otel_description="Distinct terms in the most recently built index",
    otel_kind="gauge",
)

SEARCH_LATENCY = MetricBridge(
    _SEARCH_LATENCY_PROM,
    otel_name="postings_search_query_seconds",
    otel_description="AND query evaluation latency in seconds",
    otel_kind="histogram",
)

SEARCH_COUNT = MetricBridge(
    _SEARCH_COUNT_PROM,
    otel_name="postings_search_queries_total",
    otel_description="Evaluated AND queries",
    otel_kind="counter",
)


@contextmanager
def track_latency(histogram: MetricBridge, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()
