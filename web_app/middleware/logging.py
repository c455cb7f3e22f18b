"""Request/response logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every request on arrival and every response with its duration."""

    def __init__(self, app, logger: logging.Logger = None):
        """Initialize logging middleware."""
        super().__init__(app)
        self.logger = logger or logging.getLogger("url_shortener.web")

    async def dispatch(self, request: Request, call_next: Callable):
        """Log request and response."""
        start_time = time.perf_counter()
        # Set by ForwardedHeadersMiddleware; fall back to the socket peer
        client_ip = getattr(request.state, "client_ip", None)
        if client_ip is None:
            client_ip = request.client.host if request.client else "unknown"
        user_agent = request.headers.get("user-agent")

        self.logger.info(
            f"Incoming request: {request.method} {request.url.path} from {client_ip}",
            extra={"meta": {
                "method": request.method,
                "url": str(request.url.path),
                "ip": client_ip,
                "userAgent": user_agent,
            }},
        )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.info(
            f"Response sent: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms",
            extra={"meta": {
                "method": request.method,
                "url": str(request.url.path),
                "statusCode": response.status_code,
                "duration": f"{duration_ms:.0f}ms",
            }},
        )

        return response
