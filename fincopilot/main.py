"""
FastAPI application entry point.

Configures the application with routes, middleware, and settings.
"""
import traceback

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from slowapi.errors import RateLimitExceeded

from fincopilot.api.routes import export, extract, forecast, monitoring, templates
from fincopilot.config import get_settings
from fincopilot.exceptions import FinCopilotError, ValidationError
from fincopilot.middleware import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_logging,
    limiter,
    rate_limit_exceeded_handler,
    redact_sensitive_data,
)

settings = get_settings()

configure_logging(settings.log_level)

logger = structlog.get_logger(__name__)


def _filter_sensitive_data(event: dict, hint: dict) -> dict:
    """Filter sensitive data from Sentry events before sending."""
    request = event.get("request")
    if isinstance(request, dict) and isinstance(request.get("data"), dict):
        request["data"] = redact_sensitive_data(request["data"])
    if isinstance(event.get("extra"), dict):
        event["extra"] = redact_sensitive_data(event["extra"])
    return event


if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=settings.app_version,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoggingIntegration(level=None, event_level="ERROR"),
        ],
        send_default_pii=False,
        before_send=_filter_sensitive_data,
    )


app = FastAPI(
    title="FinCopilot API",
    description="""
## Forecasting and financial data API for the FinCopilot Excel add-in

### Key Features

- **Forecasting**: linear regression, exponential smoothing, moving average and a simplified ARIMA
- **Monte Carlo**: percentile intervals from simulated percent-change paths
- **PDF Extraction**: headline figures and ratios scraped from uploaded filings
- **Export**: forecasts and extracted figures as formatted .xlsx workbooks
- **Model Templates**: section outlines for DCF, LBO, merger and custom models
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Forecasting", "description": "Series forecasting and Monte Carlo simulation"},
        {"name": "Extraction", "description": "PDF financial figure extraction"},
        {"name": "Export", "description": "Excel workbook export"},
        {"name": "Templates", "description": "Financial model template outlines"},
        {"name": "Monitoring", "description": "Health checks"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID", "Content-Disposition"],
)

app.add_middleware(SecurityHeadersMiddleware)

# Order matters: correlation ID first
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)

# Responses > 1KB
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

app.include_router(forecast.router, prefix="/api/v1", tags=["Forecasting"])
app.include_router(extract.router, prefix="/api/v1", tags=["Extraction"])
app.include_router(export.router, prefix="/api/v1", tags=["Export"])
app.include_router(templates.router, prefix="/api/v1", tags=["Templates"])

# No prefix for easy access
app.include_router(monitoring.router, tags=["Monitoring"])


@app.exception_handler(FinCopilotError)
async def fincopilot_exception_handler(request: Request, exc: FinCopilotError):
    """Handle all FinCopilot custom exceptions."""
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        "fincopilot_error",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=str(request.url.path),
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render body/query validation failures as ValidationError (400)."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    error = ValidationError("Request validation failed", errors=errors)
    logger.warning(
        "request_validation_failed",
        errors=errors,
        path=str(request.url.path),
    )
    return JSONResponse(status_code=error.http_status, content=error.to_dict())


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with consistent format."""
    sentry_sdk.capture_exception(exc)

    logger.error(
        "unhandled_error",
        error_type=type(exc).__name__,
        message=str(exc),
        path=str(request.url.path),
        traceback=traceback.format_exc(),
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "An unexpected error occurred. Please try again.",
            "error_code": "FCP-999",
            "details": {"error_type": type(exc).__name__} if settings.debug else {},
        },
    )


logger.info(
    "FinCopilot API configured",
    version=settings.app_version,
    debug=settings.debug,
    sentry_enabled=bool(settings.sentry_dsn),
)
