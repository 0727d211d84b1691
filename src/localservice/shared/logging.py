"""Logging configuration for localservice.

Diagnostics go through structlog on top of standard logging, to stderr by
default or to ``LOCALSERVICE_LOG_FILE``. User-facing progress lines are not
logged; they are echoed by the CLI.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

SECRET_MARKERS = ("PASSWORD", "SECRET", "TOKEN", "PWD")
REDACTED = "********"


def redact_secrets(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask event values whose key names a credential."""
    for key in event_dict:
        if any(marker in key.upper() for marker in SECRET_MARKERS):
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(
    level: str = "warning",
    log_file: str | Path | None = None,
    json_output: bool = False,
) -> None:
    """Configure structlog and the stdlib root logger for one CLI run.

    Args:
        level: Log level name (debug, info, warning, error, critical)
        log_file: Append to this file instead of writing to stderr
        json_output: Render JSON lines instead of console output
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    if log_file:
        handler: logging.Handler = logging.FileHandler(str(log_file))
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        format="%(message)s",
        force=True,
    )

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors.extend(
            [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        )
    else:
        # Plain text for files and pipes
        processors.append(structlog.dev.ConsoleRenderer(colors=not log_file and sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
