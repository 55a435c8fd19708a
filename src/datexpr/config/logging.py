"""Logging setup for the datexpr CLI.

Library modules log through stdlib ``logging``; the evaluator binds the
running expression name with ``structlog.contextvars`` so every record
emitted during an evaluation carries an ``expression`` key. The CLI calls
:func:`configure_logging` once to send all of it to stderr, either as
console lines or as JSON lines (``--log-json``).
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "datexpr"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        # Dates and zones in event dicts fall back to str()
        return structlog.processors.JSONRenderer(default=str)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib records through one stderr handler.

    Args:
        verbose: ``datexpr.*`` loggers at DEBUG instead of WARNING.
        log_json: JSON lines instead of console output.

    Other libraries stay at WARNING either way. Calling this again
    replaces the handler rather than adding a second one.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
