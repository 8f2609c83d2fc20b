"""JSON logging with stable schema."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from property_finder.common.constants import JSON_LOG_FIELDS
from property_finder.common.fs import ensure_dir
from property_finder.common.time_utils import utc_timestamp_iso

LOGGER_ROOT = "property_finder"


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {field: getattr(record, field, None) for field in JSON_LOG_FIELDS}
        payload["timestamp"] = utc_timestamp_iso()
        payload["message"] = record.getMessage()
        if payload["status"] is None:
            payload["status"] = "error" if record.levelno >= logging.ERROR else "ok"
        return json.dumps(payload, ensure_ascii=False)


def build_logger(run_id: str, run_meta_dir: Path | None = None, level: str = "INFO") -> logging.Logger:
    """Attach JSON handlers to the package logger so module loggers inherit them."""
    logger = logging.getLogger(LOGGER_ROOT)
    logger.setLevel(level.upper())
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    if run_meta_dir is not None:
        log_path = run_meta_dir / f"{run_id}.log.jsonl"
        ensure_dir(log_path.parent)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger, message: str, *, level: int = logging.INFO, **event_fields: Any) -> None:
    logger.log(level, message, extra=event_fields)
