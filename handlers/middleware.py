"""
handlers/middleware.py
----------------------
Request logging: one line per request with method, path, status and latency.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from utils.logger import get_logger

logger = get_logger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log every request once the response is ready."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            client = request.client.host if request.client else "-"
            logger.info(
                f"{client} {request.method} {request.url.path} "
                f"{status_code} {elapsed_ms:.1f}ms"
            )
