"""Structured logging configuration (structlog)."""

from __future__ import annotations

import logging

import structlog

from warp_agent_action.common.console import is_debug


def configure_structlog(debug: bool | None = None) -> None:
    """Configure structlog for human-readable console output.

    Call once at process startup. Debug events are only emitted when the
    runner has step debugging enabled, unless *debug* says otherwise.
    """
    if debug is None:
        debug = is_debug()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
