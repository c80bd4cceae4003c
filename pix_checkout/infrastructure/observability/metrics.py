"""Prometheus metrics for quotes, PIX charges and webhook performance"""

from prometheus_client import Counter, Histogram

# Checkout metrics
quote_counter = Counter(
    "pix_checkout_quote_total",
    "Checkout quotes computed",
    ["fulfillment"],  # delivery | pickup | dine_in
)

charge_counter = Counter(
    "pix_checkout_charge_total",
    "PIX charge attempts",
    ["outcome"],  # created | missing_key | rejected
)

charge_amount_histogram = Histogram(
    "pix_checkout_charge_amount_reais",
    "Amount of created PIX charges",
    buckets=[10, 25, 50, 100, 200, 500, 1000],
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Order webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_charge(outcome: str, amount_cents: int = 0) -> None:
    """Record a charge attempt; amount only for created charges"""
    charge_counter.labels(outcome=outcome).inc()
    if outcome == "created":
        charge_amount_histogram.observe(amount_cents / 100)
