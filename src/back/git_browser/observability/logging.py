"""Structured logging for git-browser.

Every event is rendered through structlog. Request-scoped fields live in
structlog's context variables: ``RequestContextMiddleware`` binds
``request_id`` and the repository router binds ``repo`` and ``rev``, so a
``git_command`` event emitted deep inside the runner already names the
request, repository and revision it ran for.

Usage::

    from git_browser.observability.logging import configure_logging, get_logger

    configure_logging()  # once, from create_app()
    logger = get_logger(__name__)
    logger.debug("git_command", command="log", duration_ms=4.2)
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

LEVEL_ENV_VAR = "GITBROWSER_LOG_LEVEL"
FORMAT_ENV_VAR = "GITBROWSER_LOG_FORMAT"

_configured = False


def _renderer():
    if os.environ.get(FORMAT_ENV_VAR, "json").strip().lower() == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """Route structlog and stdlib logging to stdout.

    GITBROWSER_LOG_LEVEL picks the level (default INFO; DEBUG shows every
    git invocation). GITBROWSER_LOG_FORMAT=console switches from JSON lines
    to human-readable output. Calling it again is a no-op.
    """
    global _configured
    if _configured:
        return
    _configured = True

    level_name = os.environ.get(LEVEL_ENV_VAR, "INFO").strip().upper()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(),
        ],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.INFO))

    # request_completed already covers what uvicorn's access log would say.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the given name."""
    return structlog.get_logger(name)
