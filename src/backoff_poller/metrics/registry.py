"""
Poller metrics on the Prometheus global REGISTRY.

All series are labelled by poller name.
"""

from prometheus_client import Counter, Gauge, Histogram

POLLER_INVOCATIONS_TOTAL = Counter(
    "poller_invocations_total",
    "Total number of settled poller action invocations",
    ["poller", "outcome"],  # outcome: success | failure | discarded
)

POLLER_ERROR_COUNT = Gauge(
    "poller_error_count",
    "Consecutive action failures since the last success",
    ["poller"],
)

POLLER_NEXT_DELAY_MS = Gauge(
    "poller_next_delay_ms",
    "Delay scheduled before the next invocation in milliseconds",
    ["poller"],
)

POLLER_RUNNING = Gauge(
    "poller_running",
    "1 while the poller is started, 0 otherwise",
    ["poller"],
)

POLLER_ACTION_LATENCY_MS = Histogram(
    "poller_action_latency_ms",
    "Action latency in milliseconds",
    ["poller"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000],
)


class MetricsRegistry:
    """Centralized access to poller metrics."""

    invocations_total = POLLER_INVOCATIONS_TOTAL
    error_count = POLLER_ERROR_COUNT
    next_delay_ms = POLLER_NEXT_DELAY_MS
    running = POLLER_RUNNING
    action_latency_ms = POLLER_ACTION_LATENCY_MS


# Singleton instance
metrics_registry = MetricsRegistry()
