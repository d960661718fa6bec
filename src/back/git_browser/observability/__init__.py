"""Observability for git-browser: structlog logging, Prometheus metrics
and the HTTP middleware that ties requests to both.

Quick start::

    from git_browser.observability import configure_logging
    from git_browser.observability.middleware import (
        MetricsMiddleware,
        RequestContextMiddleware,
    )

    configure_logging()
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)
"""

from .logging import configure_logging, get_logger
from .metrics import metrics_text

__all__ = [
    "configure_logging",
    "get_logger",
    "metrics_text",
]
