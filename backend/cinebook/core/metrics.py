"""
Prometheus metrics for reservations, catalog cache and auth.
Exposed at /metrics.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

booking_attempts = Counter(
    'cinebook_booking_attempts_total',
    'Seat reservation attempts',
    ['status']  # success, conflict, invalid, error
)

booking_latency = Histogram(
    'cinebook_booking_latency_seconds',
    'Seat reservation latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

cache_operations = Counter(
    'cinebook_cache_operations_total',
    'Movie catalog cache operations',
    ['operation', 'result']  # get/set/invalidate, hit/miss/error
)

auth_events = Counter(
    'cinebook_auth_events_total',
    'Registration and login outcomes',
    ['event', 'result']
)


def metrics_endpoint() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, invalid, error"""
    booking_attempts.labels(status=status).inc()


def record_cache_operation(operation: str, result: str):
    cache_operations.labels(operation=operation, result=result).inc()


def record_auth_event(event: str, success: bool):
    auth_events.labels(event=event, result="success" if success else "failure").inc()
