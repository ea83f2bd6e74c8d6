"""Structured logging for the search gateway.

Every line is rendered by ``structlog`` with the ``service`` name bound,
as JSON (``DS_LOG_FORMAT=json``) or as coloured console output.

Events the gateway emits
- ``error``: engine timeouts, unreachable engine, rejected bulk batches
  and failed searches, each carrying ``operation`` and ``error``
- ``warning``: search hits skipped because they don't decode into a
  document, and each failed engine connection attempt at startup
- ``info``: startup/shutdown, and one ``log_performance`` line per
  ingested batch (``ingest_documents``) and per search (``search_documents``)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory, add_logger_name


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    log_format: str = "json",
) -> None:
    """Send stdlib and structlog output for the gateway process to stdout.

    Parameters
    - service_name: Bound as ``service`` on every line
    - log_level: ``DEBUG``, ``INFO``, ``WARNING``, ``ERROR`` (case-insensitive)
    - log_format: ``json`` for production; ``console`` for local dev
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_logger_name,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_performance(operation: str, duration_ms: float, **kwargs: Any) -> None:
    """Emit the timing line for one ingested batch or one search.

    ``operation`` is ``ingest_documents`` or ``search_documents``; ``kwargs``
    carry the batch size and index, or the page window and the returned and
    skipped hit counts.
    """
    logger = get_logger("performance")
    logger.info(
        f"Operation {operation} completed",
        operation=operation,
        duration_ms=duration_ms,
        **kwargs
    )
