"""
Logging Middleware for Request/Response Logging

This middleware logs every HTTP request with:
- Request method and path
- Response status code
- Request processing time
- Client IP address

Redirects are logged with their status only; the target URL and the
visitor's user agent are not written to the access log.
"""

import time
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("shortlinks.access")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    Adds an X-Process-Time header (seconds) to every response.
    """

    async def dispatch(self, request: Request, call_next):
        client_ip = self._get_client_ip(request)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            process_time = time.perf_counter() - start_time
            logger.exception(
                f"{request.method} {request.url.path} "
                f"failed after {process_time*1000:.2f}ms IP:{client_ip}"
            )
            raise

        process_time = time.perf_counter() - start_time

        # Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS CLIENT_IP
        logger.info(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {process_time*1000:.2f}ms "
            f"IP:{client_ip}"
        )

        response.headers["X-Process-Time"] = str(process_time)

        return response

    def _get_client_ip(self, request: Request) -> str:
        """
        Extract client IP address from request.

        X-Forwarded-For can contain multiple IPs; the first one is the client.
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        return request.client.host if request.client else "unknown"


def add_logging_middleware(app):
    """
    Add logging middleware to FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(LoggingMiddleware)
