"""Middleware for per-IP rate limiting and security headers."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.services.rate_limit_service import RateLimitService

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed their request budget for the current window."""

    def __init__(self, app, rate_limiter: RateLimitService):
        super().__init__(app)
        self.rate_limiter = rate_limiter

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        client_ip = request.client.host if request.client else "unknown"
        allowed, info = self.rate_limiter.hit(client_ip)

        if not allowed:
            logger.warning(f"Rate limit exceeded for {client_ip}")
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests, please try again later."},
                headers={
                    "Retry-After": str(info.retry_after),
                    "X-RateLimit-Limit": str(info.requests_limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(info.requests_limit)
        response.headers["X-RateLimit-Remaining"] = str(info.requests_remaining)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add hardening headers and the request duration to every response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
