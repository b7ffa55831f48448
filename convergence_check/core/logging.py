"""Diagnostic logging for convergence-check.

The report is the only thing written to stdout; every structlog event and
every stdlib record (httpx included) goes to stderr through one
``ProcessorFormatter`` handler.

Environment:
    CONVERGENCE_LOG_LEVEL   DEBUG | INFO | WARNING | ERROR (default: WARNING)
    CONVERGENCE_LOG_FORMAT  console | json (default: console)
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

from convergence_check.exceptions import ConfigError

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_FORMATS = ("console", "json")

# Transport chatter stays quiet even at DEBUG; repository.* events cover it.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    # stderr is often redirected next to the report file; no ANSI codes.
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str | None = None) -> None:
    """Route all logging to stderr at *level* (or ``CONVERGENCE_LOG_LEVEL``).

    Raises :class:`ConfigError` for an unknown level or format name.
    """
    log_level = (level or os.environ.get("CONVERGENCE_LOG_LEVEL", "WARNING")).upper()
    if log_level not in _LEVELS:
        raise ConfigError(f"unknown log level {log_level!r}; expected one of {', '.join(_LEVELS)}")
    log_format = os.environ.get("CONVERGENCE_LOG_FORMAT", "console").lower()
    if log_format not in _FORMATS:
        raise ConfigError(f"unknown log format {log_format!r}; expected console or json")

    shared = _shared_processors()
    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers: dict[str, dict[str, str]] = {"convergence_check": {"level": log_level}}
    loggers.update({name: {"level": "WARNING"} for name in _QUIET_LOGGERS})

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "diagnostics": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "diagnostics",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": loggers,
        }
    )
