"""
Service logging: one stdout handler for stdlib and loguru records

Every line carries the request id of the HTTP call that produced it (set by
RequestCorrelationMiddleware from X-Request-ID) and is scrubbed of provider
credentials before it is written.

    configure_structured_logging()              # once, in main.py
    app.add_middleware(RequestCorrelationMiddleware)

    log_info(logger, "Fetched player-props", sport="nba", count=12)
    # {"ts": "...", "level": "INFO", "logger": "services.unified_data_service",
    #  "msg": "Fetched player-props", "request_id": "req-...", "sport": "nba", "count": 12}

LOG_FORMAT=text switches to one human-readable line per record.
"""

import json
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from loguru import logger as loguru_logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.log_sanitizer import REDACTED, _is_sensitive_key, sanitize, sanitize_dict

REQUEST_ID_HEADER = "X-Request-ID"

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes every LogRecord has; anything else on a record came from `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "taskName"}


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()


def set_request_id(request_id: str) -> None:
    _request_id_ctx.set(request_id)


def clear_request_id() -> None:
    _request_id_ctx.set(None)


def generate_request_id() -> str:
    return f"req-{uuid.uuid4().hex[:12]}"


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """
    Caller-supplied fields of a record, with secrets redacted.

    loguru records arrive with their bound fields under `extra`; those are
    flattened so both loggers produce the same keys.
    """
    fields: Dict[str, Any] = {}
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        if key == "extra" and isinstance(value, dict):
            fields.update(sanitize_dict(value))
        elif _is_sensitive_key(key):
            fields[key] = REDACTED
        elif isinstance(value, dict):
            fields[key] = sanitize_dict(value)
        elif isinstance(value, str):
            fields[key] = sanitize(value)
        else:
            fields[key] = value
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def __init__(self, include_build_sha: bool = True):
        super().__init__()
        self.build_sha = (os.getenv("GIT_COMMIT_SHA", "")[:8] or "local") if include_build_sha else None

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": sanitize(record.getMessage()),
        }
        request_id = get_request_id()
        if request_id:
            entry["request_id"] = request_id
        if self.build_sha:
            entry["build_sha"] = self.build_sha

        entry.update(record_context(record))

        if record.exc_info:
            entry["exception"] = sanitize(self.formatException(record.exc_info))
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """
    `2026-01-15 18:00:00.000 INFO [req-abc] services.unified_data_service - Fetched player-props sport=nba count=3`
    """

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        line = (
            f"{stamp} {record.levelname} [{get_request_id() or '-'}] "
            f"{record.name} - {sanitize(record.getMessage())}"
        )
        context = record_context(record)
        if context:
            line += " " + " ".join(f"{k}={v}" for k, v in context.items())
        if record.exc_info:
            line += "\n" + sanitize(self.formatException(record.exc_info))
        return line


class _LoguruBridge(logging.Handler):
    """loguru sink that re-emits through the stdlib logger of the same name."""

    def emit(self, record: logging.LogRecord) -> None:
        logging.getLogger(record.name).handle(record)


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one; echo it on the response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_request_id()


def configure_structured_logging(
    level: Optional[str] = None,
    format_type: Optional[str] = None,
    include_build_sha: bool = True,
) -> None:
    """
    Install the stdout handler on the root logger and point loguru at it.

    level / format_type default to LOG_LEVEL (INFO) and LOG_FORMAT (json).
    Existing root handlers are replaced.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    format_type = (format_type or os.getenv("LOG_FORMAT", "json")).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(include_build_sha) if format_type == "json" else TextFormatter())

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))

    loguru_logger.remove()
    loguru_logger.add(_LoguruBridge(), format="{message}", level=level)

    for name in ("httpx", "httpcore", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)


def log_info(logger: logging.Logger, message: str, **fields: Any) -> None:
    logger.info(message, extra=fields)


def log_warning(logger: logging.Logger, message: str, **fields: Any) -> None:
    logger.warning(message, extra=fields)


def log_error(logger: logging.Logger, message: str, **fields: Any) -> None:
    logger.error(message, extra=fields)
