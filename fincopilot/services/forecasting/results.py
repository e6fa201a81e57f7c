"""
Result types shared by every forecasting method.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from fincopilot.exceptions import NumericDegeneracyError


@dataclass(frozen=True)
class PredictionInterval:
    """Lower and upper bound of one forecast point."""

    lower: float
    upper: float

    def to_dict(self) -> Dict[str, float]:
        return {"lower": self.lower, "upper": self.upper}


@dataclass
class ForecastResult:
    """Point forecasts, intervals and method statistics for one call."""

    method: str
    historical_data: List[float]
    forecast: List[float]
    prediction_intervals: List[PredictionInterval]
    statistics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the wire field names."""
        return {
            "method": self.method,
            "historicalData": list(self.historical_data),
            "forecast": list(self.forecast),
            "predictionIntervals": [interval.to_dict() for interval in self.prediction_intervals],
            "statistics": dict(self.statistics),
        }


def symmetric_intervals(
    forecast: Sequence[float], half_widths: Sequence[float]
) -> List[PredictionInterval]:
    """Build intervals of ``forecast[i] -/+ half_widths[i]``."""
    return [
        PredictionInterval(lower=value - width, upper=value + width)
        for value, width in zip(forecast, half_widths)
    ]


def build_result(
    method: str,
    historical_data: Sequence[float],
    forecast: Sequence[float],
    intervals: Sequence[PredictionInterval],
    statistics: Dict[str, Any],
) -> ForecastResult:
    """
    Assemble a ForecastResult after checking it is finite and well ordered.

    Raises:
        NumericDegeneracyError: If any forecast, bound or numeric statistic is
            NaN or infinite, or a bound sits on the wrong side of its forecast.
    """
    for index, (value, interval) in enumerate(zip(forecast, intervals)):
        if not all(math.isfinite(x) for x in (value, interval.lower, interval.upper)):
            raise NumericDegeneracyError(
                "Forecast produced a non-finite value",
                details={"method": method, "index": index},
            )
        if not interval.lower <= value <= interval.upper:
            raise NumericDegeneracyError(
                "Prediction interval does not contain the forecast",
                details={"method": method, "index": index},
            )

    for name, value in statistics.items():
        if isinstance(value, float) and not math.isfinite(value):
            raise NumericDegeneracyError(
                f"Statistic '{name}' is not finite",
                details={"method": method, "statistic": name},
            )

    return ForecastResult(
        method=method,
        historical_data=list(historical_data),
        forecast=[float(value) for value in forecast],
        prediction_intervals=list(intervals),
        statistics=statistics,
    )
