"""
Logging configuration for the Chiya ordering platform

Console output for development, rotating text and JSON files, and a
structlog pipeline for structured order events.
"""

import logging
import logging.handlers
import os
import sys
import threading
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from chiya.infrastructure.configuration.config import Settings, get_config
from chiya.infrastructure.utilities.constants import FileSettings, LoggingSettings

NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "telegram", "redis")


TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# file name, minimum level, backups, JSON formatted
LOG_FILES = (
    (FileSettings.MAIN_LOG_FILE, logging.INFO, LoggingSettings.MAIN_LOG_BACKUP_COUNT, False),
    (FileSettings.ERROR_LOG_FILE, logging.ERROR, LoggingSettings.ERROR_LOG_BACKUP_COUNT, True),
    (FileSettings.JSON_LOG_FILE, logging.DEBUG, LoggingSettings.JSON_LOG_BACKUP_COUNT, True),
)


def _rotating_handler(
    path: Path, level: int, backups: int, as_json: bool
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=LoggingSettings.MAX_LOG_FILE_SIZE,
        backupCount=backups,
        encoding="utf-8",
    )
    handler.setFormatter(OrderEventFormatter() if as_json else logging.Formatter(TEXT_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logging(config: Optional[Settings] = None) -> None:
    """
    Configure root logging for the process

    - console handler (non-production only)
    - rotating text main log, JSON error-only log and JSON log of every record
    - structlog rendering JSON through the stdlib loggers
    """
    config = config or get_config()

    logs_dir = Path(config.log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    if config.environment != "production":
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(logging.INFO)
        console.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(console)

    for filename, level, backups, as_json in LOG_FILES:
        root_logger.addHandler(_rotating_handler(logs_dir / filename, level, backups, as_json))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    configure_structlog()

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"environment": config.environment, "log_level": config.log_level},
    )


def configure_structlog() -> None:
    """Route structlog events through stdlib logging as JSON"""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_structured_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


class OrderEventFormatter(jsonlogger.JsonFormatter):
    """JSON formatter carrying order and shop context when present"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["thread_name"] = threading.current_thread().name
        log_record["process_id"] = os.getpid()

        for key in ("shop_id", "order_id", "error_code"):
            if hasattr(record, key):
                log_record[key] = getattr(record, key)

        if hasattr(record, "operation_time"):
            log_record["operation_time_ms"] = record.operation_time


class PerformanceLogger:
    """Context manager for performance logging"""

    def __init__(
        self,
        operation_name: str,
        logger: Optional[logging.Logger] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.operation_name = operation_name
        self.logger = logger or logging.getLogger(__name__)
        self.details = details or {}
        self.start_time = 0.0
        self.duration_ms = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Starting operation: %s",
            self.operation_name,
            extra={"operation": self.operation_name, **self.details},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is None:
            self.logger.info(
                "Completed operation: %s (%.1f ms)",
                self.operation_name,
                self.duration_ms,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": True,
                    **self.details,
                },
            )
        else:
            self.logger.error(
                "Failed operation: %s",
                self.operation_name,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": False,
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val),
                    **self.details,
                },
            )
        return False
