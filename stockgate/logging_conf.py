# stockgate/logging_conf.py
from __future__ import annotations

import json
import logging
from logging.config import dictConfig
from typing import Any


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs to stdout."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for extra_key in ("module", "funcName"):
            val = getattr(record, extra_key, None)
            if val:
                payload[extra_key] = val
        return json.dumps(payload, ensure_ascii=False)


def _logger(level: str, handler: str = "console") -> dict[str, Any]:
    return {"level": level, "handlers": [handler], "propagate": False}


def setup_logging(log_level: str = "INFO") -> None:
    """Configure JSON logging for stockgate + uvicorn, suppress duplicate access logs."""
    log_level = log_level.upper()

    dict_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"level": log_level, "handlers": ["console"]},
        "loggers": {
            "uvicorn": _logger(log_level),
            "uvicorn.error": _logger(log_level),
            # Access lines come from our timing middleware instead
            "uvicorn.access": _logger("WARNING"),
            "fastapi": _logger(log_level),
            "httpx": _logger("WARNING"),
            "stockgate": _logger(log_level),
            "request": _logger(log_level),
        },
    }

    dictConfig(dict_config)
