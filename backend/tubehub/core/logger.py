"""JSON logging to stdout, correlated by request id and authenticated user."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# ``extra={...}`` keys promoted into the JSON line
EXTRA_KEYS = ("endpoint", "elapsed_ms", "user_id", "reason")


class JSONFormatter(logging.Formatter):
    """One JSON object per record; extras are included only when set."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update(
            {key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)}
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestContextFilter(logging.Filter):
    """Stamp records with the request id and, once authenticated, the user id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not has_request_context():
            record.request_id = None
            return True
        record.request_id = ensure_request_id()
        if not hasattr(record, "user_id") and "current_user_id" in g:
            record.user_id = g.current_user_id
        return True


def ensure_request_id() -> str:
    """Return the id bound to the current request, adopting an inbound header if any."""

    if not has_request_context():
        return uuid4().hex
    if "request_id" not in g:
        inbound = next(
            (request.headers[h] for h in INBOUND_ID_HEADERS if request.headers.get(h)), None
        )
        g.request_id = inbound or uuid4().hex
    return g.request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Replace root handlers with a single JSON stdout handler at ``level``."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Bind a request id to every request and echo it back."""

    @app.before_request
    def _bind_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["JSONFormatter", "RequestContextFilter", "configure_logging", "ensure_request_id", "init_app"]
