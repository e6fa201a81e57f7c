"""
Ordinary least squares trend forecast over the period index 1..n.
"""
import math
from typing import Sequence

import structlog

from fincopilot.exceptions import NumericDegeneracyError
from fincopilot.services.forecasting.options import ForecastOptions
from fincopilot.services.forecasting.results import ForecastResult, build_result, symmetric_intervals
from fincopilot.services.forecasting.stats import Z_CRITICAL

logger = structlog.get_logger(__name__)

METHOD = "linear"


def linear_regression(series: Sequence[float], options: ForecastOptions) -> ForecastResult:
    """
    Fit ``y = intercept + slope * x`` with x = 1..n and extrapolate.

    The prediction interval half-width for period ``n + i`` is
    ``1.96 * sqrt(SSE / (n - 2)) * sqrt(1 + 1/n + (period - mean_y)^2 / TSS)``.

    Raises:
        NumericDegeneracyError: For two observations (no residual degrees of
            freedom) or a constant series (zero total sum of squares).
    """
    n = len(series)
    if n <= 2:
        raise NumericDegeneracyError(
            "Linear regression needs at least 3 observations for a prediction interval",
            details={"method": METHOD, "n": n},
        )

    x = range(1, n + 1)
    sum_x = sum(x)
    sum_y = sum(series)
    sum_xy = sum(xi * yi for xi, yi in zip(x, series))
    sum_x2 = sum(xi * xi for xi in x)

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n

    mean_y = sum_y / n
    sse = sum((yi - (intercept + slope * xi)) ** 2 for xi, yi in zip(x, series))
    tss = sum((yi - mean_y) ** 2 for yi in series)
    if tss == 0:
        raise NumericDegeneracyError(
            "Series is constant; R-squared and the prediction interval are undefined",
            details={"method": METHOD, "n": n},
        )

    rmse = math.sqrt(sse / n)
    r_squared = 1 - sse / tss
    standard_error = math.sqrt(sse / (n - 2))

    periods = [n + i for i in range(1, options.periods + 1)]
    forecast = [intercept + slope * period for period in periods]
    half_widths = [
        Z_CRITICAL * standard_error * math.sqrt(1 + 1 / n + (period - mean_y) ** 2 / tss)
        for period in periods
    ]

    logger.debug(
        "Linear regression fitted",
        n=n,
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
    )

    return build_result(
        METHOD,
        series,
        forecast,
        symmetric_intervals(forecast, half_widths),
        {
            "slope": slope,
            "intercept": intercept,
            "rSquared": r_squared,
            "rmse": rmse,
        },
    )
