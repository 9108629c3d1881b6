# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""
Logging setup for the ess.buffer command line tools.

The library itself only emits stdlib records (storage reallocations at DEBUG).
Tools call :func:`configure_logging` once at startup so that those records and
their own structlog events end up in the same handlers, rendered either for a
terminal or as JSON lines.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

import structlog

JSON_LOG_MAX_BYTES = 10 * 1024 * 1024
JSON_LOG_BACKUP_COUNT = 5

# Applied to structlog events and, as foreign_pre_chain, to stdlib records.
_PRE_CHAIN: tuple[structlog.typing.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
)


def resolve_level(level: int | str) -> int:
    """
    Translate a level name such as ``'debug'`` into its numeric value.

    Raises
    ------
    ValueError:
        If ``level`` is not a known level name.
    """
    if isinstance(level, int):
        return level
    try:
        return logging.getLevelNamesMapping()[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None


def _formatter(
    *renderers: structlog.typing.Processor,
) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=list(_PRE_CHAIN),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )


def _console_handler(colors: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=colors)))
    return handler


def _json_file_handler(path: str | os.PathLike[str]) -> logging.Handler:
    handler = RotatingFileHandler(
        path, maxBytes=JSON_LOG_MAX_BYTES, backupCount=JSON_LOG_BACKUP_COUNT
    )
    handler.setFormatter(
        _formatter(
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        )
    )
    return handler


def configure_logging(
    *,
    level: int | str = logging.INFO,
    json_file: str | os.PathLike[str] | None = None,
    colors: bool = True,
) -> None:
    """
    Send structlog events and stdlib records to stderr and optionally a file.

    Existing root handlers are replaced, so calling this twice does not duplicate
    output. Storage reallocations only show with ``level='DEBUG'``.

    Parameters
    ----------
    level:
        Minimum level, as a number or a case-insensitive level name.
    json_file:
        If given, additionally write JSON lines to this file, rotated at
        ``JSON_LOG_MAX_BYTES`` with ``JSON_LOG_BACKUP_COUNT`` backups.
    colors:
        Whether the console output uses ANSI colors.

    Raises
    ------
    ValueError:
        If ``level`` is an unknown level name.
    """
    numeric_level = resolve_level(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(_console_handler(colors))
    if json_file is not None:
        root_logger.addHandler(_json_file_handler(json_file))
    root_logger.setLevel(numeric_level)
