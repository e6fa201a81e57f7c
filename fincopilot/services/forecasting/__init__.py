"""
Statistical forecasting toolkit.

Linear regression, exponential smoothing, moving average and a simplified
ARIMA are selected through ``generate_forecast``; Monte Carlo simulation is
available through ``monte_carlo_simulation``.
"""
from fincopilot.services.forecasting.engine import (
    METHODS,
    generate_forecast,
    monte_carlo_simulation,
    validate_series,
)
from fincopilot.services.forecasting.options import DEFAULT_OPTIONS, ForecastOptions
from fincopilot.services.forecasting.results import ForecastResult, PredictionInterval

__all__ = [
    "METHODS",
    "DEFAULT_OPTIONS",
    "ForecastOptions",
    "ForecastResult",
    "PredictionInterval",
    "generate_forecast",
    "monte_carlo_simulation",
    "validate_series",
]
