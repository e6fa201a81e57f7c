"""
Descriptive statistics and differencing helpers shared by the forecasting methods.
"""
from typing import List, Sequence

import numpy as np

# Two-sided 95% normal critical value, used by every closed-form interval
Z_CRITICAL = 1.96


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean."""
    return float(np.mean(values))


def variance(values: Sequence[float]) -> float:
    """Population variance (denominator n)."""
    return float(np.var(values))


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation, the square root of ``variance``."""
    return float(np.sqrt(variance(values)))


def root_mean_square(errors: Sequence[float], denominator: int) -> float:
    """sqrt(sum(e^2) / denominator)."""
    sse = float(np.sum(np.square(errors)))
    return float(np.sqrt(sse / denominator))


def diff(values: Sequence[float]) -> List[float]:
    """First differences: values[i] - values[i - 1]."""
    return [values[i] - values[i - 1] for i in range(1, len(values))]


def undiff(differences: Sequence[float], last_value: float) -> List[float]:
    """
    Invert one round of differencing.

    Cumulatively sums ``differences`` starting from ``last_value``; the seed
    itself is not part of the output.
    """
    restored = []
    level = last_value
    for step in differences:
        level = level + step
        restored.append(level)
    return restored
