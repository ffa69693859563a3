"""Structured logging via structlog.

Configures structlog once at application startup. Modules keep using
`logging.getLogger(__name__)`; a root handler with structlog's
`ProcessorFormatter` runs those records through the same processors as
structlog's own events.

Renderer selection:
  debug=True: `ConsoleRenderer` for local development.
  debug=False: `JSONRenderer` for machine-parseable logs in production.

The `request_id` field is injected into every log line from
`buildhook.core.middleware`, so a rejected webhook delivery can be traced
through its log lines even though its HTTP response carries no body.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

import structlog

from buildhook.core.middleware import get_request_id


_HANDLER_NAME = "buildhook"


def _inject_request_id(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: inject request_id from the middleware ContextVar."""
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def configure_structlog(debug: bool = True, stream: Optional[TextIO] = None) -> None:
    """Configure structlog for the application lifetime.

    Call once from `create_app()` before any routers are registered.
    Calling it again replaces the handler installed by the previous call.

    Args:
        debug: Pick the console renderer instead of JSON.
        stream: Where log lines go. Defaults to stdout.
    """
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_request_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Records from `logging.getLogger(__name__)` go through the same
    # processors as structlog events, so they get request_id and the renderer.
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
