"""
Middleware module initialization.
"""
from fincopilot.middleware.logging import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    configure_logging,
    get_correlation_id,
    log_performance,
    redact_sensitive_data,
)
from fincopilot.middleware.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    forecast_rate_limit,
    upload_rate_limit,
    export_rate_limit,
    RATE_LIMITS,
)
from fincopilot.middleware.security import SecurityHeadersMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "RequestLoggingMiddleware",
    "configure_logging",
    "get_correlation_id",
    "log_performance",
    "redact_sensitive_data",
    "limiter",
    "rate_limit_exceeded_handler",
    "forecast_rate_limit",
    "upload_rate_limit",
    "export_rate_limit",
    "RATE_LIMITS",
    "SecurityHeadersMiddleware",
]
