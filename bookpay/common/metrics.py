"""Prometheus metric definitions for the payment service."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)
provider_requests_total = Counter(
    "provider_requests_total",
    "Adapter operations by provider and outcome",
    ["service", "provider", "operation", "outcome"],
)
provider_latency_seconds = Histogram(
    "provider_latency_seconds",
    "Adapter operation latency seconds, including outbound provider calls",
    ["service", "provider", "operation"],
)
token_exchanges_total = Counter(
    "token_exchanges_total",
    "PayPal OAuth token exchanges",
    ["service", "outcome"],
)
signature_mismatch_total = Counter(
    "signature_mismatch_total",
    "Razorpay payment signatures that failed verification",
    ["service"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
