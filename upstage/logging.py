"""Logging utilities for upstage."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class LogFormat(Enum):
    HUMAN = "human"
    JSON = "json"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "human"
    show_timestamps: bool = True


class HumanFormatter(logging.Formatter):
    """Human-readable log formatter."""

    def __init__(self, config: LoggingConfig) -> None:
        super().__init__()
        self.config = config

    def format(self, record: logging.LogRecord) -> str:
        timestamp = ""
        if self.config.show_timestamps:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            timestamp = f"{timestamp} - "

        return f"[{record.levelname}] {timestamp}{record.getMessage()}"


class JsonFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def __init__(self, config: LoggingConfig) -> None:
        super().__init__()
        self.config = config

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "event": getattr(record, "event", "log"),
            "message": record.getMessage(),
        }

        for key in ("bucket", "key", "size", "duration", "status"):
            val = getattr(record, key, None)
            if val is not None:
                data[key] = val

        return json.dumps(data)


def get_logger(name: str, config: LoggingConfig) -> logging.Logger:
    """Create a configured logger."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JsonFormatter(config)
        if config.format == LogFormat.JSON.value
        else HumanFormatter(config)
    )
    logger.addHandler(handler)
    logger.propagate = False

    return logger


class TransferLogger:
    """Logger for the lifecycle of one object upload."""

    def __init__(self, bucket: str, key: str, logger: logging.Logger) -> None:
        self.bucket = bucket
        self.key = key
        self.logger = logger
        self.start_time: datetime | None = None

    def _elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        return (datetime.now() - self.start_time).total_seconds()

    def start(self, size: int | None = None) -> None:
        """Log upload start."""
        self.start_time = datetime.now()
        extra = {
            "event": "upload_start",
            "bucket": self.bucket,
            "key": self.key,
            "size": size,
        }
        self.logger.debug(f"Uploading s3://{self.bucket}/{self.key}", extra=extra)

    def complete(self) -> None:
        """Log upload completion."""
        duration = self._elapsed()
        extra = {
            "event": "upload_complete",
            "bucket": self.bucket,
            "key": self.key,
            "duration": duration,
            "status": "success",
        }
        self.logger.debug(
            f"Uploaded s3://{self.bucket}/{self.key} in {duration:.3f}s",
            extra=extra,
        )

    def fail(self, error: Exception) -> None:
        """Log upload failure."""
        duration = self._elapsed()
        extra = {
            "event": "upload_fail",
            "bucket": self.bucket,
            "key": self.key,
            "duration": duration,
            "status": "failed",
        }
        self.logger.error(
            f"Upload of s3://{self.bucket}/{self.key} failed after "
            f"{duration:.3f}s: {error}",
            extra=extra,
        )


def get_logging_config(
    level: str | None = None,
    format: str | None = None,
    show_timestamps: bool | None = None,
) -> LoggingConfig:
    """Create LoggingConfig with optional overrides."""
    return LoggingConfig(
        level=level or "INFO",
        format=format or "human",
        show_timestamps=show_timestamps if show_timestamps is not None else True,
    )
