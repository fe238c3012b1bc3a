"""
Prometheus Metrics for the credit evaluation services.

This module defines all metrics exposed at the /metrics endpoint of each
service. Metrics are categorized into:

1. Business Metrics - directory writes and evaluation outcomes
2. Technical Metrics - HTTP traffic and peer call latencies/failures
"""
from typing import Optional

from prometheus_client import Counter, Histogram, Info

from credito import __version__
from credito.config import settings

# =============================================================================
# SERVICE INFO
# =============================================================================

SERVICE_INFO = Info(
    "credito_service",
    "Service information"
)
SERVICE_INFO.info({
    "version": __version__,
    "service": settings.service_name,
})

# =============================================================================
# BUSINESS METRICS
# =============================================================================

# Counter: Directory writes by entity and operation
DIRECTORY_WRITES = Counter(
    "credito_directory_writes_total",
    "Writes performed on the client and card directories",
    ["entity", "operation"]  # entity: cliente, cartao. operation: create, update, delete
)

# Counter: Credit situation evaluations by outcome
EVALUATION_TOTAL = Counter(
    "credito_evaluation_total",
    "Credit situation evaluations",
    ["outcome"]  # success, client_not_found, peer_error
)

# Histogram: Evaluation latency (both peer calls included)
EVALUATION_LATENCY = Histogram(
    "credito_evaluation_latency_seconds",
    "Time to assemble a credit situation",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# =============================================================================
# TECHNICAL METRICS
# =============================================================================

# Histogram: Peer API call latency
PEER_FETCH_LATENCY = Histogram(
    "credito_peer_fetch_latency_seconds",
    "Time to fetch data from a peer service",
    ["peer"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Counter: Peer API failures
PEER_FETCH_FAILURES = Counter(
    "credito_peer_fetch_failures_total",
    "Total peer API fetch failures",
    ["peer", "error_type"]  # not_found, http_error, timeout, connection_error, invalid_response
)

# Counter: Peer API successes
PEER_FETCH_SUCCESS = Counter(
    "credito_peer_fetch_success_total",
    "Total successful peer API fetches",
    ["peer"]
)

# =============================================================================
# HTTP METRICS (Standard)
# =============================================================================

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "endpoint", "status"]
)

HTTP_REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["service", "method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def record_http_request(
    service: str,
    method: str,
    endpoint: str,
    status: int,
    latency_seconds: Optional[float] = None,
) -> None:
    """Record one HTTP request handled by a service."""
    HTTP_REQUESTS.labels(service=service, method=method, endpoint=endpoint, status=status).inc()
    if latency_seconds is not None:
        HTTP_REQUEST_LATENCY.labels(service=service, method=method, endpoint=endpoint).observe(latency_seconds)


def record_directory_write(entity: str, operation: str) -> None:
    """Record a create/update/delete on a directory."""
    DIRECTORY_WRITES.labels(entity=entity, operation=operation).inc()


def record_peer_fetch(
    peer: str,
    success: bool,
    latency_seconds: float,
    error_type: Optional[str] = None,
) -> None:
    """Record peer API fetch metrics."""
    PEER_FETCH_LATENCY.labels(peer=peer).observe(latency_seconds)

    if success:
        PEER_FETCH_SUCCESS.labels(peer=peer).inc()
    else:
        PEER_FETCH_FAILURES.labels(peer=peer, error_type=error_type or "unknown").inc()


def record_evaluation(outcome: str, latency_seconds: float) -> None:
    """
    Record the outcome of one credit situation evaluation.

    Args:
        outcome: One of "success", "client_not_found", "peer_error"
        latency_seconds: Time taken to assemble (or abort) the evaluation
    """
    EVALUATION_TOTAL.labels(outcome=outcome).inc()
    EVALUATION_LATENCY.observe(latency_seconds)
