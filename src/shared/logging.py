"""Structured logging for the engine, simulations and tests.

Environment variables:
- LOG_FORMAT: "json" for machine-readable lines, "console" or unset for
  human-readable output.
- LOG_LEVEL: "DEBUG", "INFO" (default), "WARNING", "ERROR", or "CRITICAL".
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

LOG_FORMATS = ("json", "console", "")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _is_test() -> bool:
    return "pytest" in sys.modules


def _enum_values(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Render Enum members (phases, strategies, win types) by value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, tuple | list) and any(isinstance(v, Enum) for v in value):
            event_dict[key] = [v.value if isinstance(v, Enum) else v for v in value]
    return event_dict


def resolve_log_format(value: str | None = None) -> bool:
    """Return True for json output. Reads LOG_FORMAT when value is None."""
    fmt = (os.environ.get("LOG_FORMAT", "") if value is None else value).lower()
    if fmt not in LOG_FORMATS:
        msg = f"Invalid LOG_FORMAT={fmt!r}. Must be 'json', 'console', or unset."
        raise ValueError(msg)
    return fmt == "json"


def resolve_log_level(value: str | None = None) -> int:
    """Return a stdlib level. Reads LOG_LEVEL when value is None; defaults to INFO."""
    name = (os.environ.get("LOG_LEVEL", "INFO") if value is None else value).upper()
    if name not in LOG_LEVELS:
        msg = f"Invalid LOG_LEVEL={name!r}. Must be one of {', '.join(LOG_LEVELS)}."
        raise ValueError(msg)
    return getattr(logging, name)


def _formatter(*, json_mode: bool, colors: bool = False) -> logging.Formatter:
    renderer = structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def configure_structlog() -> None:
    """Route structlog events through stdlib logging so handlers (and caplog) receive them."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _enum_values,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | None = None,
    *,
    json_mode: bool | None = None,
) -> Path | None:
    """Configure structlog and the root logger for stdout and an optional file.

    When log_dir is given (and pytest is not running) a timestamped
    simulation log is created inside it and its path returned.
    """
    if json_mode is None:
        json_mode = resolve_log_format()
    if level is None:
        level = resolve_log_level()

    configure_structlog()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(_formatter(json_mode=json_mode, colors=sys.stdout.isatty()))
    root_logger.addHandler(stdout_handler)

    if log_dir is None or _is_test():
        return None

    dir_path = Path(log_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    file_path = dir_path / f"simulation_{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
    file_handler = logging.FileHandler(file_path)
    file_handler.setFormatter(_formatter(json_mode=json_mode))
    root_logger.addHandler(file_handler)
    return file_path
