"""
Demonstration ARIMA(p, d, q) forecast.

The coefficients are not estimated: every AR lag uses ``0.7 / p``. The MA
lags (``0.3 / q`` each) never enter the forecast, so q is only reported.
With d = 0 the forecast decays towards zero.
"""
import math
from typing import List, Sequence

import structlog

from fincopilot.exceptions import ValidationError
from fincopilot.services.forecasting.options import ForecastOptions
from fincopilot.services.forecasting.results import ForecastResult, build_result, symmetric_intervals
from fincopilot.services.forecasting.stats import Z_CRITICAL, diff, standard_deviation, undiff

logger = structlog.get_logger(__name__)

METHOD = "arima"

AR_WEIGHT = 0.7


def ar_coefficients(p: int) -> List[float]:
    return [AR_WEIGHT / p] * p


def arima(series: Sequence[float], options: ForecastOptions) -> ForecastResult:
    """
    Forecast with fixed AR weights on the d-times differenced series.

    Each forecast step is appended to a working copy of the differenced
    series so later steps regress on earlier forecasts. The differenced
    forecasts are then integrated d times, pass k starting from
    ``series[n - 1 - k]``.

    Raises:
        ValidationError: If d is larger than the series length. With d == n
            the differenced series is empty, every differenced forecast is
            zero and the result comes from integration alone.
    """
    p, d, q = options.p, options.d, options.q
    n = len(series)
    if d > n:
        raise ValidationError(
            "Differencing order cannot exceed the historical data length",
            errors=[{"field": "d", "value": d, "length": n}],
        )

    working = list(series)
    for _ in range(d):
        working = diff(working)

    ar = ar_coefficients(p)

    differenced_forecast = []
    for _ in range(options.periods):
        value = 0.0
        for lag, coefficient in enumerate(ar):
            index = len(working) - lag - 1
            if index >= 0:
                value += coefficient * working[index]
        differenced_forecast.append(value)
        working.append(value)

    forecast = differenced_forecast
    for k in range(d):
        forecast = undiff(forecast, series[n - 1 - k])

    spread = standard_deviation(series)
    half_widths = [Z_CRITICAL * spread * math.sqrt(i + 1) for i in range(options.periods)]

    logger.debug("ARIMA forecast generated", p=p, d=d, q=q, n=n)

    return build_result(
        METHOD,
        series,
        forecast,
        symmetric_intervals(forecast, half_widths),
        {"p": p, "d": d, "q": q},
    )
