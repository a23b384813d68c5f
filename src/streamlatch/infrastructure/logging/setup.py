from __future__ import annotations

import logging.config
from typing import Any

import structlog

from streamlatch.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# Libraries that log every request at INFO; only shown when debugging.
_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def _shared_processors() -> list[structlog.typing.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """
    Build a dictConfig that renders stdlib and structlog records alike.

    Everything goes to stderr so command output on stdout stays clean.
    """
    if config.log_format == "json":
        renderer: structlog.typing.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    level = config.log_level
    noisy_level = "DEBUG" if level == "DEBUG" else "WARNING"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                # foreign_pre_chain runs for plain logging records (httpx, playwright)
                "foreign_pre_chain": _shared_processors(),
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
            },
        },
        "handlers": {
            "default": {
                "formatter": "structlog",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            name: {"level": noisy_level} for name in _NOISY_LOGGERS
        },
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """
    Configure structlog + stdlib logging and return the applied dictConfig.
    """
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.format_exc_info,
            # hands events to the stdlib handler so ProcessorFormatter renders them
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    cfg = build_logging_config(config)
    logging.config.dictConfig(cfg)
    log.debug(
        "logging_configured", log_format=config.log_format, log_level=config.log_level
    )
    return cfg
