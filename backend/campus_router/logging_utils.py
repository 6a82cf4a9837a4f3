from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from tempfile import gettempdir
from typing import Any

from pythonjsonlogger import jsonlogger

from .settings import settings

LOGGER_NAME = "campus_router"
LOG_FILE_NAME = "api.log.jsonl"

# Attributes LogRecord already owns; passing them through `extra` raises KeyError.
_RESERVED_RECORD_KEYS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "asctime"}
)


def _writable_log_dir() -> Path | None:
    for log_dir in (
        Path(settings.out_dir) / "logs",
        Path(gettempdir()) / "campus-router" / "logs",
    ):
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            probe = log_dir / ".writetest"
            probe.touch(exist_ok=True)
            probe.unlink(missing_ok=True)
        except OSError:
            continue
        return log_dir
    return None


@lru_cache(maxsize=1)
def get_logger() -> logging.Logger:
    """JSON logger shared by the service; stderr always, a jsonl file when writable."""
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.getLevelName(settings.log_level)
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    logger.propagate = False

    formatter = jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(message)s")
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_dir = _writable_log_dir() if settings.log_to_file else None
    if log_dir is not None:
        handlers.append(logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def _event_fields(event: str, fields: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {"event": event}
    for key, value in fields.items():
        out[f"field_{key}" if key in _RESERVED_RECORD_KEYS else key] = value
    return out


def log_event(event: str, **fields: Any) -> None:
    get_logger().info(event, extra=_event_fields(event, fields))


def log_warning(event: str, **fields: Any) -> None:
    get_logger().warning(event, extra=_event_fields(event, fields))
