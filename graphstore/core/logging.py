"""Structured logging module for graphstore-bench.

This module provides:
- JSONFormatter with timestamp, level, service, worker_id, module, message
- RotatingFileHandler for optional on-disk logs
- WorkerIdFilter tagging each record with the harness worker that emitted it
- Log level configurable via GRAPHSTORE_LOG_LEVEL env var
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any


SERVICE_NAME = "graphstore"

# Set by each harness worker thread so its log lines can be told apart.
_worker_id: ContextVar[str | None] = ContextVar("worker_id", default=None)


def set_worker_id(worker_id: str) -> None:
    """Set the worker ID for the current thread of execution."""
    _worker_id.set(worker_id)


def get_worker_id() -> str | None:
    """Get the current worker ID from context."""
    return _worker_id.get()


def clear_worker_id() -> None:
    """Clear the worker ID from context."""
    _worker_id.set(None)


class JSONFormatter(logging.Formatter):
    """JSON log formatter with standard fields."""

    def __init__(self, service_name: str = SERVICE_NAME, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        worker_id = getattr(record, "worker_id", "-")

        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "worker_id": worker_id,
            "module": record.module,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


class WorkerIdFilter(logging.Filter):
    """Filter that adds the worker ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        worker_id = get_worker_id()
        record.worker_id = worker_id if worker_id else "-"
        return True


def get_log_level_from_env(service_prefix: str = "GRAPHSTORE") -> int:
    """Get log level from GRAPHSTORE_LOG_LEVEL env var."""
    env_var = f"{service_prefix}_LOG_LEVEL"
    level_str = os.environ.get(env_var, "INFO").upper()
    level = getattr(logging, level_str, None)
    return level if isinstance(level, int) else logging.INFO


def create_file_handler(
    log_file_path: str,
    service_name: str = SERVICE_NAME,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> RotatingFileHandler:
    """Create a rotating file handler for JSON logs."""
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=log_file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(JSONFormatter(service_name=service_name))
    handler.addFilter(WorkerIdFilter())
    return handler


def setup_structured_logging(
    service_name: str = SERVICE_NAME,
    log_file_path: str | None = None,
    log_level: int | None = None,
) -> logging.Logger:
    """Set up structured logging for the ``graphstore`` logger tree.

    Errors go to stderr alongside the harness's own error output; pass
    ``log_file_path`` to also keep a rotating JSON log on disk.
    """
    if log_level is None:
        log_level = get_log_level_from_env()

    logger = logging.getLogger(service_name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JSONFormatter(service_name=service_name))
    console_handler.addFilter(WorkerIdFilter())
    logger.addHandler(console_handler)

    if log_file_path:
        try:
            file_handler = create_file_handler(log_file_path, service_name)
            file_handler.setLevel(log_level)
            logger.addHandler(file_handler)
        except PermissionError:
            logger.warning("Cannot write to %s, file logging disabled", log_file_path)

    logger.propagate = False
    return logger
