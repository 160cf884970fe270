"""Centralized Logging Setup for benchmark runs.

Usage::

    from s3bench.logging_setup import setup_logging, get_logger

    setup_logging(level="DEBUG")
    logger = get_logger(bucket="my-bucket")
    logger.info("Benchmark started")

Environment: ``S3BENCH_LOG_LEVEL``, ``S3BENCH_LOG_JSON=1`` and
``S3BENCH_LOG_FILE``.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from s3bench.config import DEFAULT_LOG_LEVEL

LOGGER_NAME = "s3bench"

_TEXT_FORMAT = (
    "%(asctime)s.%(msecs)03d %(level_tag)s %(context)-20s %(op_tag)s%(message)s"
)
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class BenchFormatter(logging.Formatter):
    """Text formatter: level, ``[bucket]`` context and ``[op]`` tag."""

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, *, use_color: bool = True) -> None:
        super().__init__(_TEXT_FORMAT, _DATE_FORMAT)
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        bucket = getattr(record, "bucket", None)
        op_type = getattr(record, "op_type", None)
        record.context = f"[{bucket}]" if bucket else ""
        record.op_tag = f"[{op_type}] " if op_type else ""

        level_tag = f"{record.levelname:8s}"
        color = self.COLORS.get(record.levelno) if self.use_color else None
        record.level_tag = f"{color}{level_tag}{self.RESET}" if color else level_tag
        return super().format(record)


class JsonFormatter(logging.Formatter):
    """One JSON object per line; unset context fields are left out."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "ts": self.formatTime(record, _DATE_FORMAT),
            "level": record.levelname,
            "msg": record.getMessage(),
        }
        for key, attr in (("bucket", "bucket"), ("op", "op_type")):
            value = getattr(record, attr, None)
            if value is not None:
                log_data[key] = value
        return json.dumps(log_data)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that merges run context into each record's extra."""

    def process(
        self,
        msg: str,
        kwargs: dict[str, Any],
    ) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **self.extra}
        return msg, kwargs


def setup_logging(
    *,
    level: str | None = None,
    log_file: str | None = None,
) -> logging.Logger:
    """Configure the ``s3bench`` logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to
            ``S3BENCH_LOG_LEVEL`` or INFO.
        log_file: Optional file path to also write logs to. Defaults
            to ``S3BENCH_LOG_FILE``.

    Returns:
        Configured logger instance.
    """
    level = level or os.environ.get("S3BENCH_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_file = log_file or os.environ.get("S3BENCH_LOG_FILE")
    use_json = os.environ.get("S3BENCH_LOG_JSON", "0") == "1"

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[tuple[logging.Handler, logging.Formatter]] = [(
        logging.StreamHandler(sys.stderr),
        JsonFormatter() if use_json else BenchFormatter(),
    )]
    if log_file:
        handlers.append((
            logging.FileHandler(log_file),
            JsonFormatter() if use_json else BenchFormatter(use_color=False),
        ))
    for handler, formatter in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(*, bucket: str | None = None) -> ContextLogger:
    """Get the ``s3bench`` logger, configuring it on first use.

    Args:
        bucket: Bucket under benchmark, shown as ``[bucket]``.
    """
    base_logger = logging.getLogger(LOGGER_NAME)

    if not base_logger.handlers:
        setup_logging()

    extra = {"bucket": bucket} if bucket is not None else {}
    return ContextLogger(base_logger, extra)
