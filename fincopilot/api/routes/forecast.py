"""
Forecasting API routes.

Thin HTTP wrappers over the forecasting engine: request bodies are converted
to engine options, engine errors propagate to the global exception handler.
"""
import structlog
from fastapi import APIRouter, Request

from fincopilot.config import get_settings
from fincopilot.exceptions import ValidationError
from fincopilot.middleware.rate_limit import forecast_rate_limit
from fincopilot.schemas.forecast import ErrorResponse, ForecastRequest, ForecastResponse
from fincopilot.services.forecasting import (
    ForecastOptions,
    generate_forecast,
    monte_carlo_simulation,
)
from fincopilot.services.forecasting.options import resolve_options

logger = structlog.get_logger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid series, options or method"},
    422: {"model": ErrorResponse, "description": "Series is numerically degenerate for the method"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
}


def check_limits(options: ForecastOptions, simulation: bool = False) -> None:
    """
    Enforce the configured horizon and iteration ceilings.

    Raises:
        ValidationError: If a limit is exceeded.
    """
    settings = get_settings()
    if options.periods > settings.max_forecast_periods:
        raise ValidationError(
            f"periods cannot exceed {settings.max_forecast_periods}",
            errors=[{"field": "periods", "value": options.periods}],
        )
    if simulation and options.iterations > settings.monte_carlo_max_iterations:
        raise ValidationError(
            f"iterations cannot exceed {settings.monte_carlo_max_iterations}",
            errors=[{"field": "iterations", "value": options.iterations}],
        )


@router.post(
    "/forecast",
    response_model=ForecastResponse,
    responses=ERROR_RESPONSES,
    summary="Generate a forecast",
    description=(
        "Forecast a numeric series with linear regression, exponential smoothing, "
        "moving average or a simplified ARIMA, selected by `options.method`."
    ),
)
@forecast_rate_limit()
async def create_forecast(request: Request, payload: ForecastRequest) -> ForecastResponse:
    """Run the selected forecasting method."""
    options = resolve_options(payload.engine_options())
    check_limits(options)

    result = generate_forecast(payload.historical_data, options)
    return ForecastResponse.from_result(result)


@router.post(
    "/forecast/monte-carlo",
    response_model=ForecastResponse,
    responses=ERROR_RESPONSES,
    summary="Run a Monte Carlo simulation",
    description=(
        "Simulate future values from historical percent changes. Uses "
        "`options.iterations`, `options.confidence` and optional `options.seed`."
    ),
)
@forecast_rate_limit()
async def create_monte_carlo(request: Request, payload: ForecastRequest) -> ForecastResponse:
    """Run a Monte Carlo simulation."""
    options = resolve_options(payload.engine_options())
    check_limits(options, simulation=True)

    result = monte_carlo_simulation(payload.historical_data, options)
    return ForecastResponse.from_result(result)
