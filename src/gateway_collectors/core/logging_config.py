"""Structured logging configuration using structlog.

The package never calls ``configure_logging()`` itself: the application
that embeds the collectors owns its logging setup and calls it once at
startup if it wants this configuration.  Library modules log through either
the stdlib API or structlog; both end up in the same handler:

Stdlib usage::

    import logging
    logger = logging.getLogger(__name__)
    logger.info("collector: ended reason=%s", reason)

Structlog usage (richer context binding)::

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("collector_ended", reason="limit", size=3)

The ``collector_id`` context variable is set by the engine while it runs a
handler, so every record emitted from inside a filter or listener carries the
id of the collector that invoked it.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, WrappedLogger

# ---------------------------------------------------------------------------
# Context variable, set by the engine around handler execution
# ---------------------------------------------------------------------------

collector_id_var: ContextVar[str | None] = ContextVar("collector_id", default=None)
"""Id of the collector whose handler is currently running, if any."""


# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------


_SECRET_SUBSTRINGS: frozenset[str] = frozenset({
    "token",
    "secret",
    "authorization",
    "password",
})
"""Lower-cased substrings that identify event-dict keys whose values must be
redacted.  Gateway clients carry bot tokens, and a careless ``repr`` of one in
a log call must not leak it."""


def _redact_secrets(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace values of secret-bearing keys with a redaction marker."""
    for key in list(event_dict.keys()):
        if any(secret in key.lower() for secret in _SECRET_SUBSTRINGS):
            event_dict[key] = "[REDACTED]"
    return event_dict


def _inject_collector_id(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Inject the current collector id into the log event dict if set.

    Runs after ``merge_contextvars`` and acts as a fallback for records that
    were emitted without a bound ``collector_id``.

    Args:
        logger: The wrapped logger instance (unused).
        method_name: The log method name (unused).
        event_dict: Mutable event dictionary being assembled.

    Returns:
        The event dict, possibly with ``collector_id`` added.
    """
    cid = collector_id_var.get()
    if cid is not None and "collector_id" not in event_dict:
        event_dict["collector_id"] = cid
    return event_dict


# ---------------------------------------------------------------------------
# Public configuration entry-point
# ---------------------------------------------------------------------------


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog with JSON output, or coloured output for DEBUG.

    Standard fields added to every log record:

    - ``timestamp``: ISO 8601 string.
    - ``level``: Log level name.
    - ``logger``: Module name that emitted the record.
    - ``collector_id``: Id of the running collector, when there is one.
    - ``event``: The log message string.

    Safe to call more than once; the root handler is replaced each time.

    Args:
        log_level: One of ``"DEBUG"``, ``"INFO"``, ``"WARNING"``,
            ``"ERROR"``, ``"CRITICAL"``.  Case-insensitive.
    """
    level_upper = log_level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)
    is_development = level_upper == "DEBUG"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _inject_collector_id,
        _redact_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if is_development:
        final_renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(
            colors=True,
        )
    else:
        final_renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    if not is_development:
        logging.getLogger("asyncio").setLevel(logging.WARNING)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
