"""
Rate limiting for the forecasting, upload and export endpoints using slowapi.
"""
from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse
import structlog

from fincopilot.config import get_settings

logger = structlog.get_logger(__name__)


def get_client_identifier(request: Request) -> str:
    """Identify the caller by forwarded address, falling back to the peer IP."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_identifier,
    enabled=get_settings().rate_limit_enabled,
)


RATE_LIMITS = {
    "forecast": "120/minute",      # forecasts are cheap but Monte Carlo is CPU bound
    "upload": "20/hour",
    "export": "60/hour",
}

RETRY_AFTER_SECONDS = 60


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Render a rate limit rejection in the API error format."""
    logger.warning(
        "rate_limit_exceeded",
        client=get_client_identifier(request),
        path=request.url.path,
        limit=str(exc.detail),
    )

    return JSONResponse(
        status_code=429,
        content={
            "error": "Too many requests. Please slow down.",
            "error_code": "FCP-429",
            "details": {
                "limit": str(exc.detail),
                "retry_after_seconds": RETRY_AFTER_SECONDS,
            },
        },
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


def forecast_rate_limit():
    """Rate limit decorator for forecasting endpoints."""
    return limiter.limit(RATE_LIMITS["forecast"])


def upload_rate_limit():
    """Rate limit decorator for upload endpoints."""
    return limiter.limit(RATE_LIMITS["upload"])


def export_rate_limit():
    """Rate limit decorator for export endpoints."""
    return limiter.limit(RATE_LIMITS["export"])
