from __future__ import annotations

"""Structured JSON logging helpers with operation-scoped context."""

import json
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, TextIO


# Context propagated into every log line.
_CONTEXT: logging.LoggerAdapter | None = None

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }
)


def _context_vars() -> Dict[str, object]:
    if _CONTEXT is None:
        return {}
    data = getattr(_CONTEXT, "extra", {}) or {}
    return dict(data)


class ContextAwareAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        context = _context_vars()
        context.update(self.extra or {})
        record_extra = kwargs.get("extra") or {}
        context.update(record_extra)
        kwargs["extra"] = context
        return msg, kwargs


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - logging override
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Merge contextual extras (operation, key size, request id, ...).
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class _ContextFilter(logging.Filter):
    """Copy the shared context onto records emitted through plain module loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _context_vars().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def configure_json_logging(
    level: int | str = logging.INFO,
    *,
    stream: TextIO | None = None,
    json_lines: bool = True,
) -> None:
    """Route application logs through a JSON formatter with contextual extras.

    Logs go to stderr by default: stdout carries ciphertext and plaintext.
    """

    global _CONTEXT
    base_logger = logging.getLogger()
    handler = logging.StreamHandler(stream=stream or sys.stderr)
    if json_lines:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler.addFilter(_ContextFilter())
    base_logger.handlers = [handler]
    base_logger.setLevel(level)

    if _CONTEXT is None:
        _CONTEXT = ContextAwareAdapter(base_logger, extra={})


def set_log_context(**fields: object) -> None:
    """Update the shared logging context for subsequent log lines."""

    global _CONTEXT
    if _CONTEXT is None:
        _CONTEXT = ContextAwareAdapter(logging.getLogger(), extra={})

    extras = getattr(_CONTEXT, "extra", {}) or {}
    extras.update({k: v for k, v in fields.items() if v is not None})
    _CONTEXT.extra = extras


@contextmanager
def log_context(**fields: object):
    """Temporarily push contextual fields (operation, request_id, etc.)."""

    if _CONTEXT is None:
        set_log_context()
    adapter = _CONTEXT  # type: ignore[misc]
    prev = dict(adapter.extra or {})
    set_log_context(**fields)
    try:
        yield
    finally:
        adapter.extra = prev


def get_logger(name: str) -> logging.LoggerAdapter:
    return ContextAwareAdapter(logging.getLogger(name), extra={})
