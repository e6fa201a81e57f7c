"""
Trailing unweighted moving average forecast.
"""
import math
from typing import List, Sequence

import structlog

from fincopilot.exceptions import ValidationError
from fincopilot.services.forecasting.options import ForecastOptions
from fincopilot.services.forecasting.results import ForecastResult, build_result, symmetric_intervals
from fincopilot.services.forecasting.stats import Z_CRITICAL, mean, root_mean_square

logger = structlog.get_logger(__name__)

METHOD = "moving-average"


def rolling_means(series: Sequence[float], window_size: int) -> List[float]:
    """Mean of every full window, aligned at the window's right edge."""
    return [
        mean(series[end - window_size + 1:end + 1])
        for end in range(window_size - 1, len(series))
    ]


def moving_average(series: Sequence[float], options: ForecastOptions) -> ForecastResult:
    """
    Forecast flat at the last window mean.

    Raises:
        ValidationError: If the window is longer than the series.
    """
    window_size = options.window_size
    if window_size > len(series):
        raise ValidationError(
            "Window size cannot be larger than the historical data length",
            errors=[{"field": "windowSize", "value": window_size, "length": len(series)}],
        )

    averages = rolling_means(series, window_size)
    errors = [
        series[window_size - 1 + offset] - average
        for offset, average in enumerate(averages)
    ]
    rmse = root_mean_square(errors, len(errors))

    forecast = [averages[-1]] * options.periods
    half_widths = [
        Z_CRITICAL * rmse * math.sqrt(1 + (i + 1) / window_size)
        for i in range(options.periods)
    ]

    logger.debug("Moving average fitted", window_size=window_size, last_average=averages[-1], rmse=rmse)

    return build_result(
        METHOD,
        series,
        forecast,
        symmetric_intervals(forecast, half_widths),
        {"windowSize": window_size, "rmse": rmse},
    )
