"""
Prometheus metrics for the CRM.

Custom metrics for HTTP traffic, payments and background jobs.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Auth metrics
login_attempts_total = Counter(
    "crm_login_attempts_total",
    "Login attempts by outcome",
    ["outcome"],
)

# Billing metrics
checkout_sessions_created_total = Counter(
    "crm_checkout_sessions_created_total",
    "Checkout sessions created",
    ["payment_type"],
)

webhook_events_total = Counter(
    "crm_webhook_events_total",
    "Payment webhook events received",
    ["event_type", "outcome"],
)

payments_recorded_total = Counter(
    "crm_payments_recorded_total",
    "Payments recorded from webhook events",
    ["source"],
)

# License metrics
license_status_changes_total = Counter(
    "crm_license_status_changes_total",
    "License status transitions",
    ["status"],
)

# Cache metrics
cache_hits_total = Counter(
    "cache_hits_total",
    "Total cache hits",
    ["cache_key"],
)

cache_misses_total = Counter(
    "cache_misses_total",
    "Total cache misses",
    ["cache_key"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)

# Domain event metrics
event_handler_failures_total = Counter(
    "crm_event_handler_failures_total",
    "Domain event handlers that raised",
    ["event_type", "handler"],
)
