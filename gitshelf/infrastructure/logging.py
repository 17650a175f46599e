import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import Processor

from gitshelf.infrastructure.logging_processors import (
    add_operation_context,
    add_service_context,
    format_exception_info,
    sanitize_sensitive_data,
)


def setup_logging(level: str = "WARNING", log_format: str = "console", stream: Optional[Any] = None) -> None:
    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        add_operation_context,
        structlog.processors.add_log_level,
        timestamper,
        # Should be last before rendering
        sanitize_sensitive_data,
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
        shared_processors.insert(-1, format_exception_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.rich_traceback,
        )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # stdout belongs to the interactive menu
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    for logger_name in ["httpx", "httpcore"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)
