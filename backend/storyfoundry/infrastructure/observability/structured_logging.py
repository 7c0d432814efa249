"""Structlog configuration helpers."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

import structlog

SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def json_formatter() -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering both stdlib and structlog records as one JSON object per line."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_structlog(handlers: Optional[Iterable[logging.Handler]] = None) -> None:
    """Render log records as JSON.

    Modules log through ``logging.getLogger(__name__)``, so the JSON
    formatter goes on the handlers (the root logger's by default) rather
    than only on structlog's own loggers.
    """
    structlog.configure(
        processors=SHARED_PROCESSORS + [
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if handlers is None:
        root = logging.getLogger()
        if not root.handlers:
            root.addHandler(logging.StreamHandler())
        handlers = root.handlers

    formatter = json_formatter()
    for handler in handlers:
        handler.setFormatter(formatter)
    logging.getLogger(__name__).info("structlog configured")
