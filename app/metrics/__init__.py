# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "membership_requests_total",
    "Total HTTP requests to the membership service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "membership_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "membership_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
MEMBER_OPERATIONS = Counter(
    "membership_member_operations_total",
    "Member lifecycle operations by outcome",
    ["operation", "outcome"],
)
STORE_LATENCY = Histogram(
    "membership_store_call_duration_seconds",
    "Latency of record store round trips",
    ["operation"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
ACTIVE_SESSIONS = Gauge(
    "membership_active_sessions",
    "Number of signed-in sessions",
)
AUTH_ATTEMPTS = Counter(
    "membership_auth_attempts_total",
    "Sign-in and sign-up attempts by outcome",
    ["action", "outcome"],
)
