"""
Monte Carlo simulation of compounding percent changes.

Each path starts at the last observation and grows by
``1 + mean + std * Z`` per period, where mean and std describe the historical
percent changes and Z is a standard normal draw produced by the Box-Muller
transform.
"""
import math
from typing import Iterator, List, Optional, Sequence

import numpy as np
import structlog

from fincopilot.exceptions import NumericDegeneracyError
from fincopilot.services.forecasting.options import ForecastOptions
from fincopilot.services.forecasting.results import ForecastResult, PredictionInterval, build_result
from fincopilot.services.forecasting.stats import mean, standard_deviation

logger = structlog.get_logger(__name__)

METHOD = "monte-carlo"


def percent_changes(series: Sequence[float]) -> List[float]:
    """``series[i] / series[i-1] - 1`` for every consecutive pair."""
    zero_positions = [i for i, value in enumerate(series[:-1]) if value == 0]
    if zero_positions:
        raise NumericDegeneracyError(
            "Percent changes are undefined after a zero value",
            details={"method": METHOD, "zero_indices": zero_positions},
        )
    return [series[i] / series[i - 1] - 1 for i in range(1, len(series))]


def box_muller(rng: np.random.Generator, size: int) -> np.ndarray:
    """Standard normal draws, two uniforms per sample."""
    # 1 - U keeps u1 in (0, 1] so the logarithm stays finite
    u1 = 1.0 - rng.random(size)
    u2 = rng.random(size)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def percentile_indices(iterations: int, confidence: float) -> tuple:
    """Index of the lower and upper bound in a sorted sample of ``iterations`` values."""
    lower = math.floor(iterations * (1 - confidence) / 2)
    upper = math.floor(iterations * (1 - (1 - confidence) / 2))
    return min(lower, iterations - 1), min(upper, iterations - 1)


def simulate_periods(
    last_value: float,
    drift: float,
    volatility: float,
    iterations: int,
    periods: int,
    rng: np.random.Generator,
) -> Iterator[np.ndarray]:
    """
    Yield the ``iterations`` simulated values of each period in turn.

    Only the current period is held in memory, so large
    ``iterations x periods`` requests stay O(iterations).
    """
    level = np.full(iterations, last_value, dtype=float)
    for _ in range(periods):
        level = level * (1 + drift + volatility * box_muller(rng, iterations))
        yield level


def monte_carlo(
    series: Sequence[float],
    options: ForecastOptions,
    rng: Optional[np.random.Generator] = None,
) -> ForecastResult:
    """
    Simulate ``options.iterations`` paths ``options.periods`` steps ahead.

    The point forecast is the mean across paths; bounds are order statistics
    of the sorted simulated values (no interpolation).
    """
    changes = percent_changes(series)
    drift = mean(changes)
    volatility = standard_deviation(changes)

    if rng is None:
        rng = np.random.default_rng(options.seed)

    lower_index, upper_index = percentile_indices(options.iterations, options.confidence)

    forecast: List[float] = []
    intervals: List[PredictionInterval] = []
    for values in simulate_periods(
        series[-1], drift, volatility, options.iterations, options.periods, rng
    ):
        point = float(values.mean())
        ordered = np.partition(values, [lower_index, upper_index])
        forecast.append(point)
        # The mean of a skewed sample can fall outside a narrow percentile band
        intervals.append(
            PredictionInterval(
                lower=min(float(ordered[lower_index]), point),
                upper=max(float(ordered[upper_index]), point),
            )
        )

    logger.debug(
        "Monte Carlo simulation complete",
        iterations=options.iterations,
        periods=options.periods,
        drift=drift,
        volatility=volatility,
    )

    return build_result(
        METHOD,
        series,
        forecast,
        intervals,
        {"iterations": options.iterations, "mean": drift, "stdDev": volatility},
    )
