"""Request logging middleware."""

from __future__ import annotations

import time
import uuid

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id into the log context and log each request's outcome."""

    def __init__(self, app, *, enabled: bool = True, slow_request_ms: int = 1000):
        super().__init__(app)
        self.enabled = enabled
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        started = time.perf_counter()
        with logger.contextualize(request_id=request_id, route=request.url.path):
            response = await call_next(request)
            duration_ms = int((time.perf_counter() - started) * 1000)
            response.headers[REQUEST_ID_HEADER] = request_id
            if self.enabled:
                if duration_ms >= self.slow_request_ms:
                    logger.warning(
                        "{} {} -> {} slow ({} ms)", request.method, request.url.path, response.status_code, duration_ms
                    )
                else:
                    logger.info("{} {} -> {} ({} ms)", request.method, request.url.path, response.status_code, duration_ms)
        return response
