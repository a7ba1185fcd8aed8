"""Prometheus metrics for the Financial Health Score service.

Metrics are organized into two categories:

Business Metrics (for Product):
- health_score_calculated_total: Scores computed, by level
- health_score_value: Distribution of total scores
- health_score_low_factor_total: Sub-factors scoring below the tip threshold

Technical Metrics (for Engineering/SRE):
- health_score_latency_seconds: Scoring request latency
- health_score_history_failures_total: Score history store failures
- health_score_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator, Iterable

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product dashboards)
# =============================================================================

score_calculated_total = Counter(
    "health_score_calculated_total",
    "Total number of financial health scores calculated",
    ["level"],
)

score_value = Histogram(
    "health_score_value",
    "Distribution of total financial health scores",
    buckets=[100, 200, 300, 400, 500, 600, 700, 750, 800, 900, 1000],
)

low_factor_total = Counter(
    "health_score_low_factor_total",
    "Sub-factors that scored below the tip threshold",
    ["factor"],
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

score_latency = Histogram(
    "health_score_latency_seconds",
    "Score request latency in seconds",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

history_failures = Counter(
    "health_score_history_failures_total",
    "Total number of score history store failures",
    ["operation"],  # read, upsert
)

http_requests_total = Counter(
    "health_score_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "health_score_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_score(level: int, total: int, low_factors: Iterable[str] = ()) -> None:
    """Record a computed score in metrics."""
    score_calculated_total.labels(level=str(level)).inc()
    score_value.observe(total)
    for factor in low_factors:
        low_factor_total.labels(factor=factor).inc()


@contextmanager
def track_score_latency() -> Generator[None, None, None]:
    """Context manager to track scoring latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        score_latency.observe(duration)


def record_history_failure(operation: str) -> None:
    """Record a score history store failure."""
    history_failures.labels(operation=operation).inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
