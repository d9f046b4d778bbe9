"""Logging configuration helpers."""
from __future__ import annotations

import json
import logging
from logging.config import dictConfig
from pathlib import Path
from typing import Any, Dict

from .config import Settings, load_settings

APP_LOG_FILE = "application.log"
PROVIDER_LOG_FILE = "providers.log"
CLIENT_LOG_FILE = "client.log"


class _JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = record.stack_info
        return json.dumps(payload, ensure_ascii=False)


def _file_handler(directory: Path, filename: str, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.FileHandler",
        "formatter": "json",
        "level": level,
        "filename": str(directory / filename),
        "encoding": "utf-8",
        "mode": "a",
    }


def _isolated(handlers: list[str], level: str) -> Dict[str, Any]:
    return {"handlers": handlers, "level": level, "propagate": False}


def build_logging_config(settings: Settings | None = None) -> Dict[str, Any]:
    """Return a dictionary config for logging.

    Provider calls and the chat client get their own files on top of the
    application log so upstream failures can be read without request noise.
    """

    settings = settings or load_settings()
    options = settings.logging
    directory = Path(options.directory)
    level = options.level.upper()
    provider_level = options.provider_level.upper()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": f"{__name__}._JsonFormatter"},
            "console": {"format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json" if options.json_console else "console",
                "level": level,
            },
            "plain": {"class": "logging.StreamHandler", "formatter": "console"},
            "app_file": _file_handler(directory, APP_LOG_FILE, level),
            "provider_file": _file_handler(directory, PROVIDER_LOG_FILE, provider_level),
            "client_file": _file_handler(directory, CLIENT_LOG_FILE, level),
        },
        "loggers": {
            "": {"handlers": ["default", "app_file"], "level": level},
            "uvicorn": _isolated(["plain"], level),
            "uvicorn.error": _isolated(["default"], level),
            "uvicorn.access": _isolated(["default"], level),
            "humbl.infrastructure.providers": _isolated(
                ["default", "provider_file", "app_file"], provider_level
            ),
            "humbl.client": _isolated(["default", "client_file"], level),
            "httpx": _isolated(["default"], "WARNING"),
        },
    }


def setup_logging(settings: Settings | None = None) -> None:
    """Configure logging for the application."""

    settings = settings or load_settings()
    Path(settings.logging.directory).mkdir(parents=True, exist_ok=True)
    dictConfig(build_logging_config(settings))


__all__ = ["setup_logging", "build_logging_config"]
