"""Prometheus metrics for monitoring plan eligibility, bookings, and webhook performance"""

from prometheus_client import Counter, Histogram

# Plan metrics
plan_calculation_counter = Counter(
    "layby_plan_calculation_total",
    "Total payment plan calculations",
    ["outcome"],  # eligible | ineligible
)

installment_count_histogram = Histogram(
    "layby_installment_count",
    "Weekly installments per eligible plan",
    buckets=[1, 2, 4, 8, 13, 20, 26],
)

# Booking metrics
booking_counter = Counter(
    "layby_booking_total",
    "Bookings created",
    ["payment_type"],  # installments | full
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Payment processor webhook response time",
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


def record_plan_calculation(eligible: bool, installment_count: int | None) -> None:
    """Record eligibility rate and schedule length distribution"""
    outcome = "eligible" if eligible else "ineligible"
    plan_calculation_counter.labels(outcome=outcome).inc()

    if eligible and installment_count:
        installment_count_histogram.observe(installment_count)


def record_booking(payment_type: str) -> None:
    booking_counter.labels(payment_type=payment_type).inc()
