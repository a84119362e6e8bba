"""Request Logging Middleware — one structured log line per HTTP request.

Invariants:
    - Logs method, path, status code and duration in milliseconds
    - Health checks are logged at DEBUG to keep production logs quiet
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

_QUIET_PREFIXES = ("/api/v1/health",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)

        level = logging.INFO
        if request.url.path.startswith(_QUIET_PREFIXES):
            level = logging.DEBUG
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
