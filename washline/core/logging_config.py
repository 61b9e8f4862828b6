"""Washline — Logging setup, installed once at application startup."""
import logging.config

from washline.config import get_settings


def setup_logging(level: str | None = None) -> None:
    level = (level or get_settings().LOG_LEVEL).upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "washline": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": level},
            # SQL echo is governed by DEBUG on the engine
            "sqlalchemy.engine": {"level": "WARNING"},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    })
