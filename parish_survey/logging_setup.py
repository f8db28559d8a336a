"""Central logging configuration for the Parish Survey service.

Routes every module logger, uvicorn included, to one stdout handler. The root
level defaults to INFO and follows `SURVEY_LOG_LEVEL` when set. httpx request
lines are kept at WARNING so REST sink traffic does not drown survey events.
"""
from __future__ import annotations

import logging
import os
from logging.config import dictConfig

DEFAULT_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


def _level() -> str:
    level = (os.environ.get("SURVEY_LOG_LEVEL") or DEFAULT_LEVEL).strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else DEFAULT_LEVEL


def build_logging_config(level: str = DEFAULT_LEVEL) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "uvicorn": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": level, "handlers": ["console"], "propagate": False},
            "httpx": {"level": "WARNING"},
        },
    }


def configure_logging() -> None:
    """Configure logging once; a root logger that already has handlers is left alone."""
    if logging.getLogger().handlers:
        return
    dictConfig(build_logging_config(_level()))


__all__ = ["build_logging_config", "configure_logging"]
