"""
Simple exponential smoothing (level only, no trend or seasonality).
"""
import math
from typing import List, Sequence

import structlog

from fincopilot.services.forecasting.options import ForecastOptions
from fincopilot.services.forecasting.results import ForecastResult, build_result, symmetric_intervals
from fincopilot.services.forecasting.stats import Z_CRITICAL, root_mean_square

logger = structlog.get_logger(__name__)

METHOD = "exponential"


def smooth(series: Sequence[float], alpha: float) -> List[float]:
    """Return the smoothed level at every observation, seeded with the first value."""
    levels = [series[0]]
    for value in series[1:]:
        levels.append(alpha * value + (1 - alpha) * levels[-1])
    return levels


def exponential_smoothing(series: Sequence[float], options: ForecastOptions) -> ForecastResult:
    """
    Forecast flat at the last smoothed level.

    Errors are one-step-ahead (``y[i] - level[i-1]``, zero for the first
    point); the RMSE divides by n - 1 and the half-width at horizon step i
    (0-based) is ``1.96 * rmse * sqrt(1 + (i + 1))``.
    """
    alpha = options.alpha
    levels = smooth(series, alpha)

    errors = [0.0] + [series[i] - levels[i - 1] for i in range(1, len(series))]
    rmse = root_mean_square(errors, len(series) - 1)

    forecast = [levels[-1]] * options.periods
    half_widths = [Z_CRITICAL * rmse * math.sqrt(1 + (i + 1)) for i in range(options.periods)]

    logger.debug("Exponential smoothing fitted", alpha=alpha, level=levels[-1], rmse=rmse)

    return build_result(
        METHOD,
        series,
        forecast,
        symmetric_intervals(forecast, half_widths),
        {"alpha": alpha, "rmse": rmse},
    )
