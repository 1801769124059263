# hackreg/metrics.py
from prometheus_client import Counter, Histogram, CollectorRegistry

# Dedicated registry so reloads and repeated app builds (tests) don't collide
REGISTRY = CollectorRegistry(auto_describe=True)

REGISTRATIONS = Counter(
    "registrations_total",
    "Number of team registration attempts",
    ["outcome"],
    registry=REGISTRY,
)

REGISTRATION_LATENCY = Histogram(
    "registration_latency_seconds",
    "Latency of team registrations in seconds",
    registry=REGISTRY,
)

ADMIN_LOGINS = Counter(
    "admin_logins_total",
    "Number of admin login attempts",
    ["outcome"],
    registry=REGISTRY,
)

TEAMS_DELETED = Counter(
    "teams_deleted_total",
    "Number of teams deleted from the dashboard",
    registry=REGISTRY,
)
