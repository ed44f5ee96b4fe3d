# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics - single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "courtdesk_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "courtdesk_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "courtdesk_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
CNR_LOOKUPS = Counter(
    "courtdesk_cnr_lookups_total",
    "CNR lookups by outcome",
    ["outcome"],
)
PROVIDER_LATENCY = Histogram(
    "courtdesk_provider_request_duration_seconds",
    "Latency of calls to the eCourts provider",
    ["operation"],
)
CASE_SEARCHES = Counter(
    "courtdesk_case_searches_total",
    "Advocate / advanced case searches",
    ["search_type", "outcome"],
)
DISPLAY_NAME_RESOLUTIONS = Counter(
    "courtdesk_display_name_resolutions_total",
    "Display-name resolutions by source",
    ["source"],
)
GUARD_DECISIONS = Counter(
    "courtdesk_guard_decisions_total",
    "Route guard decisions by action",
    ["action"],
)
LOGINS = Counter(
    "courtdesk_logins_total",
    "Login attempts by outcome",
    ["outcome"],
)
ACTIVE_SESSIONS = Gauge(
    "courtdesk_active_sessions",
    "Number of live sessions",
)
TEAM_MEMBERS = Gauge(
    "courtdesk_team_members",
    "Number of team members in the local roster",
)
