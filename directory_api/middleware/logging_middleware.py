"""
Request logging middleware with correlation IDs for request tracing.

Each request gets a short ID (or keeps a well-formed ``X-Request-ID`` sent by a
proxy). The ID, method and path are bound to structlog's context variables so
every log line emitted while handling the request carries them.
"""
import logging
import re
import time
import uuid
from typing import Callable, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

logger = logging.getLogger(__name__)


def get_request_id() -> str:
    """Get the current request ID from context."""
    return structlog.contextvars.get_contextvars().get("request_id", "")


def _incoming_request_id(request: Request) -> Optional[str]:
    candidate = request.headers.get(REQUEST_ID_HEADER)
    if candidate and _VALID_REQUEST_ID.match(candidate):
        return candidate
    return None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Binds request context for logging and logs one line per completed request"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _incoming_request_id(request) or uuid.uuid4().hex[:8]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"{request.method} {request.url.path} failed after {duration_ms:.0f}ms",
                extra={"duration_ms": round(duration_ms, 1), "event_type": "request_error"},
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.0f}ms)",
            extra={
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 1),
                "query": str(request.query_params),
                "event_type": "request_end",
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class ContextualLogger:
    """
    Logger wrapper that prefixes messages with the current request ID, for
    console output where bound context is not shown inline.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _prefixed(self, msg: str) -> str:
        request_id = get_request_id()
        return f"[{request_id}] {msg}" if request_id else msg

    def debug(self, msg: str, *args, **kwargs):
        self.logger.debug(self._prefixed(msg), *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self.logger.info(self._prefixed(msg), *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self.logger.warning(self._prefixed(msg), *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self.logger.error(self._prefixed(msg), *args, **kwargs)


def get_logger(name: str) -> ContextualLogger:
    """Get a contextual logger that includes the request ID."""
    return ContextualLogger(name)
