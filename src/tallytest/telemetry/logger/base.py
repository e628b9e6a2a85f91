# src/tallytest/telemetry/logger/base.py

import logging
import sys
from typing import TextIO

import structlog
from structlog.typing import FilteringBoundLogger

from tallytest.telemetry.logger.processors import (
    add_emoji_processor,
    remove_extra_keys_processor,
)

SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    add_emoji_processor,
    remove_extra_keys_processor,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]


def _handler(handler: logging.Handler, renderer: structlog.types.Processor) -> logging.Handler:
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))
    return handler


def setup_logging(
    level: int = logging.WARNING,
    json_logs: bool = False,
    log_file: str | None = None,
    file_only: bool = False,
    stream: TextIO | None = None,
) -> None:
    """
    Routes tallytest's structlog loggers through stdlib logging.

    The console handler is bound to `stream` (stdout by default) as it is
    at setup time, so test files that run later with stdout redirected
    into the capture buffer never receive diagnostic lines. The optional
    `log_file` always gets JSON lines. Existing root handlers are replaced.
    """
    structlog.configure(
        processors=SHARED_PROCESSORS,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []
    if not file_only:
        console_renderer = (
            structlog.processors.JSONRenderer(sort_keys=True)
            if json_logs
            else structlog.dev.ConsoleRenderer(colors=True)
        )
        handlers.append(_handler(logging.StreamHandler(stream or sys.stdout), console_renderer))
    if log_file:
        handlers.append(
            _handler(logging.FileHandler(log_file, encoding="utf-8"), structlog.processors.JSONRenderer(sort_keys=True))
        )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    structlog.get_logger("tallytest").debug(
        "Logging configured",
        level=logging.getLevelName(level),
        console=not file_only,
        json_console=json_logs,
        log_file=log_file,
    )


StructLogger = FilteringBoundLogger

# 🔼⚙️
