# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Log output configuration using structlog.

Services log through the standard library (``logging.getLogger(__name__)``
with ``%s`` arguments). Their records are rendered by a structlog
ProcessorFormatter on the root handler: JSON outside development, colored
console lines otherwise. Request-scoped values such as the acting user are
bound with bind_context and appear on every record of that request.

Example:
    >>> from src.utils.logging import setup_logging
    >>> from src.core.config import get_settings
    >>> setup_logging(get_settings())
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from src.core.config.settings import Settings

_QUIET_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "sqlalchemy",
    "asyncio",
    "alembic",
)


def build_formatter(settings: "Settings") -> structlog.stdlib.ProcessorFormatter:
    """Build the formatter that renders standard library log records.

    Args:
        settings: Application settings; debug or development selects the
            console renderer.

    Returns:
        Formatter adding bound context, level, logger name, ``extra``
        fields and an ISO timestamp to each record.
    """
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.is_development or settings.debug:
        processors: list[Processor] = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=processors,
    )


def setup_logging(settings: "Settings") -> None:
    """Route all standard library logging through the structlog formatter.

    Replaces the root handlers, so calling it again (for example from a
    second create_app()) does not duplicate output.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(settings))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def bind_context(**kwargs: object) -> None:
    """Bind values to every log record emitted in the current context.

    Example:
        >>> bind_context(actor="Maria Santos")
        >>> logger.info("Submitting grades")  # record carries actor
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all values bound with bind_context."""
    structlog.contextvars.clear_contextvars()
