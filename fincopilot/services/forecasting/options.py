"""
Forecast option record and its merge/validation rules.
"""
import math
import numbers
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from fincopilot.exceptions import ValidationError

# Wire (camelCase) names accepted next to the attribute names
OPTION_ALIASES = {
    "windowSize": "window_size",
}


@dataclass(frozen=True)
class ForecastOptions:
    """
    Immutable forecasting configuration.

    Attributes:
        method: linear, exponential, moving-average or arima.
        periods: Forecast horizon.
        confidence: Confidence level, used by the Monte Carlo percentiles.
        seasonality: Reserved season length, not consumed by any method.
        alpha: Exponential smoothing factor.
        window_size: Moving average window.
        p, d, q: ARIMA orders.
        iterations: Monte Carlo paths.
        seed: Optional Monte Carlo seed; unseeded when None.
        extras: Unrecognized caller keys, carried but ignored.
    """

    method: str = "linear"
    periods: int = 5
    confidence: float = 0.95
    seasonality: int = 1
    alpha: float = 0.3
    window_size: int = 3
    p: int = 1
    d: int = 0
    q: int = 1
    iterations: int = 1000
    seed: Optional[int] = None
    extras: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, overrides: Optional[Mapping[str, Any]] = None) -> "ForecastOptions":
        """Merge caller keys over the defaults; caller keys win."""
        if not overrides:
            return DEFAULT_OPTIONS

        known = {f.name for f in fields(cls)} - {"extras"}
        values = {}
        extras = {}
        for key, value in overrides.items():
            name = OPTION_ALIASES.get(key, key)
            if name in known:
                values[name] = value
            else:
                extras[key] = value

        return replace(DEFAULT_OPTIONS, extras=MappingProxyType(extras), **values)

    def validated(self) -> "ForecastOptions":
        """Check and normalize numeric fields, raising ValidationError on the first problem."""
        return replace(
            self,
            periods=_as_int("periods", self.periods, minimum=1),
            confidence=_as_fraction("confidence", self.confidence, upper_inclusive=False),
            alpha=_as_fraction("alpha", self.alpha, upper_inclusive=True),
            window_size=_as_int("windowSize", self.window_size, minimum=1),
            p=_as_int("p", self.p, minimum=1),
            d=_as_int("d", self.d, minimum=0),
            q=_as_int("q", self.q, minimum=0),
            iterations=_as_int("iterations", self.iterations, minimum=1),
            seed=None if self.seed is None else _as_int("seed", self.seed, minimum=0),
        )


DEFAULT_OPTIONS = ForecastOptions()


def resolve_options(options: Union[ForecastOptions, Mapping[str, Any], None]) -> ForecastOptions:
    """Accept a ForecastOptions, a plain mapping or None and return validated options."""
    if isinstance(options, ForecastOptions):
        return options.validated()
    if options is not None and not isinstance(options, Mapping):
        raise ValidationError("Options must be an object", errors=[{"field": "options"}])
    return ForecastOptions.from_mapping(options).validated()


def _as_int(name: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise _option_error(name, value, "must be an integer")
    if isinstance(value, numbers.Integral):
        number = int(value)
    elif math.isfinite(value) and float(value).is_integer():
        number = int(value)
    else:
        raise _option_error(name, value, "must be an integer")
    if number < minimum:
        raise _option_error(name, value, f"must be >= {minimum}")
    return number


def _as_fraction(name: str, value: Any, upper_inclusive: bool) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise _option_error(name, value, "must be a number")
    number = float(value)
    in_range = 0.0 < number <= 1.0 if upper_inclusive else 0.0 < number < 1.0
    if not in_range:
        bound = "(0, 1]" if upper_inclusive else "(0, 1)"
        raise _option_error(name, value, f"must be in {bound}")
    return number


def _option_error(name: str, value: Any, reason: str) -> ValidationError:
    return ValidationError(
        f"Invalid option '{name}': {reason}",
        errors=[{"field": name, "value": repr(value), "message": reason}],
    )
