"""
HTTP request logging middleware.

Every request gets a request id, echoed back in ``x-request-id``, and a
relay operation name. Both are bound for all downstream log lines, so a
submission's simulation, nonce resync and send can be correlated.
Health checks are logged at DEBUG.
"""

import time
import uuid
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.stdlib.get_logger("http")

REQUEST_ID_HEADER = "x-request-id"
QUIET_PATHS = frozenset({"/healthz"})


def operation_for_path(path: str) -> Optional[str]:
    """Name of the relay operation served at ``path``, e.g. ``register``."""
    if "/integrations/" not in path:
        return None
    return path.rstrip("/").rsplit("/", 1)[-1].replace("-", "_") or None


def log_level_for(path: str, status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "debug" if path in QUIET_PATHS else "info"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind relay request context and log one line per request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        path = request.url.path
        operation = operation_for_path(path)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        if operation:
            structlog.contextvars.bind_contextvars(operation=operation)

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            getattr(logger, log_level_for(path, status_code))(
                "http_request",
                method=request.method,
                path=path,
                status=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
                client=request.client.host if request.client else None,
            )
