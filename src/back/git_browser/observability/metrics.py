"""Prometheus metrics for git-browser.

Usage::

    from git_browser.observability.metrics import GIT_COMMANDS_TOTAL

    GIT_COMMANDS_TOTAL.labels(command="log", outcome="ok").inc()
"""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

# ---------------------------------------------------------------------------
# HTTP request metrics
# ---------------------------------------------------------------------------

HTTP_REQUESTS_TOTAL = Counter(
    "http_server_requests_total",
    "HTTP requests by method, route template and status code.",
    labelnames=["method", "route", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_server_request_duration_seconds",
    "HTTP request latency in seconds by route template.",
    labelnames=["method", "route"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

HTTP_REQUESTS_IN_FLIGHT = Gauge(
    "http_server_requests_in_flight",
    "Number of HTTP requests currently being processed.",
    registry=REGISTRY,
)

# ---------------------------------------------------------------------------
# Git subprocess metrics
# ---------------------------------------------------------------------------

GIT_COMMANDS_TOTAL = Counter(
    "git_commands_total",
    "git invocations by subcommand and outcome (ok, error, timeout).",
    labelnames=["command", "outcome"],
    registry=REGISTRY,
)

GIT_COMMAND_DURATION_SECONDS = Histogram(
    "git_command_duration_seconds",
    "Wall-clock duration of git invocations in seconds.",
    labelnames=["command"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
    registry=REGISTRY,
)


def metrics_text() -> tuple[bytes, str]:
    """Generate Prometheus exposition text and content-type header."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
