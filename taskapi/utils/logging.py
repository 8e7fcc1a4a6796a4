"""Logging configuration utilities."""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

from taskapi.settings import Settings, get_settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logging_config(settings: Settings) -> Dict[str, Any]:
    """
    Get logging configuration dictionary.

    Args:
        settings: Application settings

    Returns:
        Logging configuration for dictConfig
    """
    formatter = "json" if settings.log_format == "json" else "standard"
    log_file = Path(settings.log_dir) / "taskapi.log"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": TEXT_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.log_level,
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": settings.log_level,
                "formatter": formatter,
                "filename": str(log_file),
                "maxBytes": 10485760,
                "backupCount": 10,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "taskapi": {
                "level": settings.log_level,
                "handlers": ["console", "file"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "redis": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": settings.log_level,
            "handlers": ["console"],
        },
    }


def setup_logging() -> None:
    """Setup logging configuration."""
    settings = get_settings()

    Path(settings.log_dir).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(get_logging_config(settings))

    logger = logging.getLogger("taskapi")
    logger.info("Logging configured successfully")
