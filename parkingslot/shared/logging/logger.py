"""Structured logging utilities."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from typing import Any

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")

# Third-party loggers that are noisy at INFO
_QUIET_LOGGERS = {
    "werkzeug": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


def _log_file_path() -> str:
    configured = os.getenv("LOG_FILE")
    if configured:
        return configured
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../../instance"))
    return os.path.join(root, "parkingslot.log")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def _patch_record(record) -> None:
    record["extra"].setdefault("correlation_id", _CORRELATION_ID.get())
    sanitize_record(record)


class _InterceptHandler(logging.Handler):
    """Route stdlib logging (werkzeug, sqlalchemy, httpx) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


class ContextualLogger:
    """Proxy for loguru that injects correlation ids via ContextVar."""

    def __getattr__(self, name):  # pragma: no cover
        bound = _logger.bind(correlation_id=_CORRELATION_ID.get())
        return getattr(bound, name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")


def _file_sink_options(level: str) -> dict[str, Any]:
    options: dict[str, Any] = {
        "level": level,
        "backtrace": False,
        "diagnose": False,
        "enqueue": True,
        "encoding": "utf-8",
        "rotation": os.getenv("LOG_ROTATION", "10 MB"),
        "retention": os.getenv("LOG_RETENTION", "14 days"),
    }
    if _env_flag("LOG_JSON"):
        options["serialize"] = True
    else:
        options.update(format=_FMT, colorize=False)
    return options


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    """Install the stderr and file sinks.

    ``LOG_LEVEL`` overrides the level, ``LOG_FILE`` the file path, and
    ``LOG_JSON=1`` writes the file sink as one JSON document per line.
    Every record passes through the redaction patcher before any sink sees it.
    """
    level = (level or os.getenv("LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper()
    log_file = _log_file_path()
    os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)

    _logger.remove()
    _logger.configure(patcher=_patch_record)
    _logger.add(
        sys.stderr,
        level=level,
        format=_FMT,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )
    _logger.add(log_file, **_file_sink_options(level))

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


logger = ContextualLogger()

__all__ = [
    "logger",
    "setup_logging",
    "set_correlation_id",
    "clear_correlation_id",
    "get_correlation_id",
]
