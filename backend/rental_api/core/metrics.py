"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# History endpoint metrics
history_requests = Counter(
    'history_requests_total',
    'Total history requests',
    ['operation', 'outcome']  # outcome: success, rejected, error
)

# Create requests turned away by a business rule
booking_rejections = Counter(
    'booking_rejections_total',
    'Booking requests rejected by validation or business rules',
    ['reason']
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_history_request(operation: str, outcome: str):
    """Record a history request. Outcome: success, rejected, error"""
    history_requests.labels(operation=operation, outcome=outcome).inc()


def record_booking_rejection(reason: str):
    booking_rejections.labels(reason=reason).inc()
