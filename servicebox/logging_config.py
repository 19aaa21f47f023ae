"""Structured logging configuration for servicebox.

The library itself only emits events through ``get_logger``; applications
decide where they go by calling ``configure_logging`` once at startup
(directly or through ``ContainerSettings.configure_logging``).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

LIBRARY_LOGGER = "servicebox"

# Silent until the application installs handlers.
logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())


def build_processors(json_output: bool = False, colors: bool = True) -> list[Any]:
    """Return the structlog processor chain.

    Args:
        json_output: Render events as JSON lines instead of console text
        colors: Use ANSI colors in console output
    """
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Path | None = None,
    colors: bool = True,
) -> None:
    """Configure stdlib logging and structlog together.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Whether to output JSON format
        log_file: Optional file to append to instead of stderr
        colors: Whether to use colors in console output
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    # force=True closes the previous handlers, releasing any open log file.
    logging.basicConfig(format="%(message)s", handlers=[handler], level=numeric, force=True)

    structlog.configure(
        processors=build_processors(json_output=json_output, colors=colors and log_file is None),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger backed by the stdlib logger ``name``.

    Events always pass through stdlib logging, so nothing is printed until
    the application configures handlers, whatever structlog's global
    defaults are. Processors are resolved lazily, so modules may create the
    logger at import time before ``configure_logging`` runs.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
