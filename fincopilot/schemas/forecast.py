"""
Pydantic schemas for the forecasting endpoints.

Field names on the wire are camelCase to match the task pane client.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

from fincopilot.services.forecasting import ForecastResult, PredictionInterval

DEFAULT_FORECAST_PERIOD = 5

# JSON numbers only; booleans and numeric strings are rejected
Observation = Union[StrictInt, StrictFloat]

# Statistics are written into single worksheet cells
StatisticValue = Optional[Union[int, float, str]]


class ForecastRequest(BaseModel):
    """Request body for forecast and Monte Carlo endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    historical_data: List[Observation] = Field(
        ..., alias="historicalData", description="Historical observations, oldest first"
    )
    forecast_period: Optional[int] = Field(
        None, alias="forecastPeriod", description="Forecast horizon (default 5)"
    )
    options: Optional[Dict[str, Any]] = Field(
        None,
        description="method, periods, confidence, alpha, windowSize, p, d, q, iterations, seed",
    )

    def engine_options(self) -> Dict[str, Any]:
        """Options for the engine; an explicit ``options.periods`` wins over ``forecastPeriod``."""
        periods = DEFAULT_FORECAST_PERIOD if self.forecast_period is None else self.forecast_period
        return {"periods": periods, **(self.options or {})}


class PredictionIntervalModel(BaseModel):
    """Bounds of one forecast point."""

    lower: float
    upper: float


class ForecastResponse(BaseModel):
    """Forecast result as returned to (and accepted back from) the client."""

    model_config = ConfigDict(populate_by_name=True)

    method: str = Field(..., description="Method that produced the forecast")
    historical_data: List[float] = Field(..., alias="historicalData")
    forecast: List[float] = Field(..., description="Point forecasts")
    prediction_intervals: List[PredictionIntervalModel] = Field(..., alias="predictionIntervals")
    statistics: Dict[str, StatisticValue] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: ForecastResult) -> "ForecastResponse":
        return cls.model_validate(result.to_dict())

    def to_result(self) -> ForecastResult:
        return ForecastResult(
            method=self.method,
            historical_data=list(self.historical_data),
            forecast=list(self.forecast),
            prediction_intervals=[
                PredictionInterval(lower=interval.lower, upper=interval.upper)
                for interval in self.prediction_intervals
            ],
            statistics=dict(self.statistics),
        )


class ErrorResponse(BaseModel):
    """Response model for API errors."""

    error: str = Field(..., description="Error message")
    error_code: str = Field(..., description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
