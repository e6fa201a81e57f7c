"""
Forecast dispatcher.

Validates the historical series, merges caller options over the defaults and
routes to the selected method. Monte Carlo simulation has its own entry point
and is not reachable through the method selector.
"""
import math
import numbers
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
import structlog

from fincopilot.exceptions import UnsupportedMethodError, ValidationError
from fincopilot.middleware.logging import log_performance
from fincopilot.services.forecasting.arima import arima
from fincopilot.services.forecasting.exponential import exponential_smoothing
from fincopilot.services.forecasting.linear import linear_regression
from fincopilot.services.forecasting.monte_carlo import monte_carlo
from fincopilot.services.forecasting.moving_average import moving_average
from fincopilot.services.forecasting.options import ForecastOptions, resolve_options
from fincopilot.services.forecasting.results import ForecastResult

logger = structlog.get_logger(__name__)

MIN_OBSERVATIONS = 2

OptionsLike = Union[ForecastOptions, Mapping[str, Any], None]

METHODS: Dict[str, Callable[[List[float], ForecastOptions], ForecastResult]] = {
    "linear": linear_regression,
    "exponential": exponential_smoothing,
    "moving-average": moving_average,
    "arima": arima,
}


def validate_series(series: Any) -> List[float]:
    """
    Return the series as a list of floats.

    Raises:
        ValidationError: If the input is not a one-dimensional sequence of at
            least two finite real numbers.
    """
    message = f"Historical data must be an array with at least {MIN_OBSERVATIONS} data points"
    if isinstance(series, (str, bytes)) or not isinstance(series, (Sequence, np.ndarray)):
        raise ValidationError(message, errors=[{"field": "historicalData", "message": "not an array"}])

    values = []
    for index, value in enumerate(series):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ValidationError(
                "Historical data must contain only numbers",
                errors=[{"field": "historicalData", "index": index, "value": repr(value)}],
            )
        value = float(value)
        if not math.isfinite(value):
            raise ValidationError(
                "Historical data must contain only finite numbers",
                errors=[{"field": "historicalData", "index": index, "value": repr(value)}],
            )
        values.append(value)

    if len(values) < MIN_OBSERVATIONS:
        raise ValidationError(
            message,
            errors=[{"field": "historicalData", "length": len(values)}],
        )
    return values


@log_performance("forecast")
def generate_forecast(series: Any, options: OptionsLike = None) -> ForecastResult:
    """
    Forecast ``series`` with the method named in ``options``.

    Args:
        series: Historical observations, oldest first.
        options: ForecastOptions or a mapping of overrides (wire names such as
            ``windowSize`` are accepted). Unknown keys are ignored.

    Returns:
        ForecastResult with ``options.periods`` points and intervals.

    Raises:
        ValidationError: Malformed series or options.
        UnsupportedMethodError: Method outside linear, exponential,
            moving-average and arima.
        NumericDegeneracyError: The method cannot produce finite output.
    """
    values = validate_series(series)
    resolved = resolve_options(options)

    method = METHODS.get(resolved.method) if isinstance(resolved.method, str) else None
    if method is None:
        raise UnsupportedMethodError(resolved.method, supported=list(METHODS))

    logger.info(
        "Generating forecast",
        method=resolved.method,
        observations=len(values),
        periods=resolved.periods,
    )
    return method(values, resolved)


@log_performance("monte_carlo")
def monte_carlo_simulation(
    series: Any,
    options: OptionsLike = None,
    rng: Optional[np.random.Generator] = None,
) -> ForecastResult:
    """
    Simulate future values from the historical percent changes.

    Uses ``iterations``, ``periods``, ``confidence`` and ``seed`` from
    ``options``; the method selector is ignored. Pass ``rng`` to control the
    random source directly.
    """
    values = validate_series(series)
    resolved = resolve_options(options)

    logger.info(
        "Running Monte Carlo simulation",
        observations=len(values),
        periods=resolved.periods,
        iterations=resolved.iterations,
    )
    return monte_carlo(values, resolved, rng=rng)
