"""
Security headers middleware.

The task pane loads the API from inside an Office host frame, so framing is
limited to the Office origins instead of being denied outright.
"""
import os
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds security headers to all responses.

    Headers added:
    - X-Content-Type-Options: nosniff
    - Referrer-Policy
    - Content-Security-Policy (frame-ancestors restricted to Office hosts)
    - Strict-Transport-Security (when ENABLE_HSTS=true)
    """

    ENABLE_HSTS = os.getenv("ENABLE_HSTS", "false").lower() == "true"

    HSTS_MAX_AGE = 31536000

    CSP_POLICY = "; ".join([
        "default-src 'self'",
        "script-src 'self' https://appsforoffice.microsoft.com",
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data:",
        "connect-src 'self'",
        "frame-ancestors 'self' https://*.office.com https://*.officeapps.live.com",
        "base-uri 'self'",
    ])

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = self.CSP_POLICY

        if self.ENABLE_HSTS:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={self.HSTS_MAX_AGE}; includeSubDomains"
            )

        if "Server" in response.headers:
            del response.headers["Server"]

        return response
