"""HTTP middleware: request context, completion logging and Prometheus metrics.

- ``RequestContextMiddleware`` binds a request id into structlog's context
  variables, echoes it as ``X-Request-ID`` and logs one
  ``request_completed`` event naming the matched route, repository and
  revision.
- ``MetricsMiddleware`` counts and times requests, labelled by route
  template (``/api/repos/{repo}/tree/{rev}/{path:path}``) rather than by the
  raw URL, which embeds revisions and file paths.
"""

from __future__ import annotations

import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from structlog.contextvars import bound_contextvars

from .logging import get_logger
from .metrics import (
    HTTP_REQUEST_DURATION_SECONDS,
    HTTP_REQUESTS_IN_FLIGHT,
    HTTP_REQUESTS_TOTAL,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
UNMATCHED_ROUTE = "unmatched"

_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._-]{8,128}")


def _request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_RE.fullmatch(incoming):
        return incoming
    return uuid.uuid4().hex


def route_template(request: Request) -> str:
    """Path template of the route that handled the request.

    Only known once the router has run; before that, or for URLs that
    match no route, returns ``"unmatched"``.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlate every log line of a request and log its completion."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        rid = _request_id(request)
        start = time.perf_counter()
        with bound_contextvars(request_id=rid):
            response = await call_next(request)
            params = request.path_params
            logger.info(
                "request_completed",
                method=request.method,
                route=route_template(request),
                repo=params.get("repo"),
                rev=params.get("rev") or params.get("hash"),
                status=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
        response.headers[REQUEST_ID_HEADER] = rid
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record Prometheus HTTP metrics, one series per route template."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        method = request.method
        HTTP_REQUESTS_IN_FLIGHT.inc()
        start = time.perf_counter()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            HTTP_REQUESTS_IN_FLIGHT.dec()
            route = route_template(request)
            HTTP_REQUEST_DURATION_SECONDS.labels(method=method, route=route).observe(
                time.perf_counter() - start
            )
            HTTP_REQUESTS_TOTAL.labels(method=method, route=route, status=status).inc()
