"""Structured JSON logging for the ingest service.

Emits one JSON object per record on stdout with GCP-compatible field names
(``severity``, ``timestamp``, ``logger``) so container log collectors can
index them. Extra fields passed via ``extra={...}`` (tier names, durations,
chunk counts) are carried into the JSON payload as-is.

Usage:
    from url_ingest.logging_config import configure_logging
    configure_logging("DEBUG")
"""

import logging
import logging.config

# httpx/httpcore log every request at INFO; fallback chains make that noisy
_QUIET_LOGGERS = ("httpx", "httpcore", "trafilatura")


def build_logging_config(level: str = "INFO") -> dict:
    """Return a dictConfig mapping for JSON logging at the given root level."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(funcName)s %(message)s",
                "rename_fields": {
                    "levelname": "severity",
                    "asctime": "timestamp",
                    "name": "logger",
                },
                "static_fields": {
                    "service": "url-ingest",
                },
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply structured JSON logging configuration.

    Call once at startup (the FastAPI lifespan does this).
    """
    logging.config.dictConfig(build_logging_config(level))
