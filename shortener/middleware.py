"""HTTP middleware for the slug shortener.

Middleware Stack (outermost first)
==================================
::
    SecurityHeadersMiddleware   helmet-style response headers
    AccessLogMiddleware         one Common Log Format line per request
    UnhandledErrorMiddleware    last-resort JSON error (shortener.handlers)
    FastAPI router
"""

import logging
import time
from datetime import datetime, timezone
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

__all__ = ["SECURITY_HEADERS", "AccessLogMiddleware", "SecurityHeadersMiddleware"]

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add the security headers to every response unless a route set them."""

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log each request in Common Log Format."""

    def __init__(self, app, logger: logging.Logger | None = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortener.access")

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        client_ip = request.client.host if request.client else "-"
        timestamp = datetime.now(timezone.utc).strftime("%d/%b/%Y:%H:%M:%S %z")
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        length = response.headers.get("content-length", "-")
        self.logger.info(
            f'{client_ip} - - [{timestamp}] "{request.method} {target} '
            f'HTTP/{request.scope.get("http_version", "1.1")}" {response.status_code} {length}',
            extra={"duration_ms": round(duration_ms, 2)},
        )
        return response
