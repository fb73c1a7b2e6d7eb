"""Structured logging configuration.

JSON lines when ENABLE_JSON_LOGS=1 (default), a short human format otherwise.
Level comes from LOG_LEVEL. Besides timestamp, level, msg and logger, any of
EXTRA_FIELDS passed through ``extra=`` is emitted.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import uuid
from time import time

# request fields from the middleware, then CRS diagnostics
EXTRA_FIELDS = ("request_id", "path", "method", "status", "duration_ms", "issue", "record_id")


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting
        base = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        base.update({k: getattr(record, k) for k in EXTRA_FIELDS if hasattr(record, k)})
        if record.exc_info and record.exc_info[0]:
            base["exc_type"] = record.exc_info[0].__name__
        return json.dumps(base, ensure_ascii=False, default=str)


class _PlainFormatter(logging.Formatter):  # pragma: no cover - formatting
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            self.formatTime(record, datefmt="%H:%M:%S"),
            record.levelname[0],
            record.name + ":",
            record.getMessage(),
        ]
        parts.extend(f"{k}={getattr(record, k)}" for k in EXTRA_FIELDS if hasattr(record, k))
        return " ".join(parts)


def configure_logging() -> None:
    if getattr(configure_logging, "_configured", False):  # idempotent
        return
    json_enabled = os.getenv("ENABLE_JSON_LOGS", "1") == "1"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_enabled else _PlainFormatter())
    root = logging.getLogger()
    root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    for h in list(root.handlers):  # drop uvicorn's default handlers so lines are not doubled
        root.removeHandler(h)
    root.addHandler(handler)
    configure_logging._configured = True  # type: ignore[attr-defined]


async def logging_middleware(request, call_next):  # pragma: no cover - thin wrapper
    rid = uuid.uuid4().hex[:8]
    start = time()
    request.state.request_id = rid
    logger = logging.getLogger("request")
    logger.info("request.start", extra={"request_id": rid, "path": request.url.path, "method": request.method})
    status = None
    try:
        response = await call_next(request)
        status = response.status_code
        return response
    finally:
        logger.info(
            "request.end",
            extra={
                "request_id": rid,
                "path": request.url.path,
                "method": request.method,
                "status": status,
                "duration_ms": round((time() - start) * 1000.0, 2),
            },
        )
