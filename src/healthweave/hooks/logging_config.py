"""Structured logging configuration using structlog.

JSON lines when stderr is not a terminal, colored console output otherwise.
Standard-library loggers (``logging.getLogger(__name__)``) are routed through
the same processor chain so every module keeps its plain ``log.info`` calls.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from healthweave.core.config import ObservabilityConfig

# Third-party loggers that are noisy at INFO.
_QUIET_LOGGERS = ("LiteLLM", "litellm", "botocore", "urllib3", "httpx")


def setup_logging(config: ObservabilityConfig, *, json_output: bool | None = None) -> None:
    """Configure structured logging for the whole process.

    ``json_output`` forces the renderer; by default it follows whether
    stderr is attached to a terminal.
    """
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    if json_output is None:
        json_output = not sys.stderr.isatty()

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("healthweave").setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.contextvars.bind_contextvars(service=config.service_name)


def bind_request_context(**values: str) -> None:
    """Attach request-scoped values (requester, report id) to every log line."""
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context(*keys: str) -> None:
    """Drop request-scoped values; with no keys, drop everything."""
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()
