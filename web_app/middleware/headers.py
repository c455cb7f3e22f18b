"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortener.common.headers import extract_forwarded_headers, get_client_ip


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to extract X-Forwarded-* headers and the client IP.

    Must be the outermost middleware so request logging sees client_ip.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and store forwarded headers on request.state."""
        headers = dict(request.headers)
        forwarded = extract_forwarded_headers(headers)

        # Read by request_base_url when building shortlinks
        request.state.forwarded_proto = forwarded["forwarded_proto"]
        request.state.forwarded_host = forwarded["forwarded_host"]

        # First X-Forwarded-For entry, else the socket peer
        request.state.client_ip = get_client_ip(
            headers,
            peer_host=request.client.host if request.client else None,
        )

        return await call_next(request)
