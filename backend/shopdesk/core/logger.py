"""JSON log lines on stdout, correlated by request id and principal."""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# ``extra=`` attributes copied into the JSON object when present.
EXTRA_KEYS = ("endpoint", "elapsed_ms", "event", "user_id", "session_id", "status")


class JSONFormatter(logging.Formatter):
    """One JSON object per record; exceptions go to ``exc_info`` as text."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        payload: dict[str, Any] = {
            "time": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update({k: getattr(record, k) for k in EXTRA_KEYS if hasattr(record, k)})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestContextFilter(logging.Filter):
    """
    Stamp ``request_id`` (and ``user_id`` once authenticated) on every record.

    Outside a request both stay unset/``None``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not has_request_context():
            record.request_id = None
            return True
        record.request_id = ensure_request_id()
        principal = g.get("principal")
        if principal is not None and not hasattr(record, "user_id"):
            record.user_id = principal.id
        return True


def ensure_request_id() -> str:
    """
    Return the id of the current request.

    The first call per request adopts an inbound ``X-Request-ID`` /
    ``X-Correlation-ID`` header or mints a UUID; later calls reuse it.
    """
    if not has_request_context():
        return str(uuid4())
    request_id = g.get("request_id")
    if request_id is None:
        inbound = (request.headers.get(h) for h in INBOUND_ID_HEADERS)
        request_id = next((v for v in inbound if v), None) or str(uuid4())
        g.request_id = request_id
    return request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Replace the root handlers with a single JSON stdout handler."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Seed the request id, echo it back and log each request at DEBUG."""

    app.logger.addFilter(RequestContextFilter())
    access_log = logging.getLogger("shopdesk.request")

    @app.before_request
    def _start_request() -> None:
        ensure_request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        started = g.get("request_started")
        if started is not None:
            access_log.debug(
                "request.completed %s %s",
                request.method,
                request.path,
                extra={
                    "endpoint": request.endpoint,
                    "status": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        return response


__all__ = [
    "EXTRA_KEYS",
    "JSONFormatter",
    "RequestContextFilter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
]
