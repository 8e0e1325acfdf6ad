import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import g, has_app_context, has_request_context, request

# Extra attributes callers pass via ``extra=`` that are worth keeping in the JSON line
CONTEXT_FIELDS = ("playlist_id", "outcome", "upstream_status", "policy", "ip", "track_index")


class RequestContextFilter(logging.Filter):
    """Attach request-scoped metadata to log records.

    Records emitted outside a request (player threads, skip timers) get
    ``None`` for every request field instead of raising.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = getattr(g, "request_id", None) if has_app_context() else None
        if has_request_context():
            record.path = request.path
            record.method = request.method
            record.remote_addr = request.headers.get("X-Forwarded-For", request.remote_addr)
        else:
            record.path = None
            record.method = None
            record.remote_addr = None
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record: request context plus known domain extras."""

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
            "path": getattr(record, "path", None),
            "method": getattr(record, "method", None),
            "remote_addr": getattr(record, "remote_addr", None),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _has_json_stream(root: logging.Logger) -> bool:
    return any(
        isinstance(handler, logging.StreamHandler)
        and isinstance(getattr(handler, "formatter", None), JsonFormatter)
        for handler in root.handlers
    )


def configure_structured_logging(app, level: Optional[int] = None) -> None:
    """Attach JSON stdout logging to the root logger (once per process)."""
    root = logging.getLogger()
    if level is not None:
        root.setLevel(level)
    if _has_json_stream(root):
        return

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(JsonFormatter())
    stream_handler.addFilter(RequestContextFilter())
    root.addHandler(stream_handler)
    app.logger.debug("Structured logging attached to root logger")


__all__ = ["RequestContextFilter", "JsonFormatter", "configure_structured_logging", "CONTEXT_FIELDS"]
