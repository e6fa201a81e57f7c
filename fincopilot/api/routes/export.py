"""
Workbook export API routes.
"""
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Body, Query, Request, Response
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from fincopilot.exceptions import TemplateNotFoundError, ValidationError
from fincopilot.middleware.rate_limit import export_rate_limit
from fincopilot.schemas.extract import ExtractedFinancials
from fincopilot.schemas.forecast import ErrorResponse, ForecastResponse
from fincopilot.schemas.models import DCFModelRequest, LBOModelRequest, MergerModelRequest
from fincopilot.services.excel_builder import (
    COLORWAYS,
    STYLES,
    XLSX_MEDIA_TYPE,
    DCFWorkbookBuilder,
    FinancialsWorkbookBuilder,
    ForecastWorkbookBuilder,
    LBOWorkbookBuilder,
    MergerWorkbookBuilder,
    workbook_to_bytes,
)

logger = structlog.get_logger(__name__)

router = APIRouter()

# Model type -> (parameter schema, builder)
MODEL_EXPORTS = {
    "dcf": (DCFModelRequest, DCFWorkbookBuilder),
    "lbo": (LBOModelRequest, LBOWorkbookBuilder),
    "merger": (MergerModelRequest, MergerWorkbookBuilder),
}


class ExportOptionsResponse(BaseModel):
    """Available styles and colorways."""

    styles: List[str]
    colorways: List[str]


def xlsx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/export/options",
    response_model=ExportOptionsResponse,
    summary="Get export options",
)
async def get_export_options() -> ExportOptionsResponse:
    """List the style and colorway names accepted by the export endpoints."""
    return ExportOptionsResponse(styles=list(STYLES), colorways=list(COLORWAYS))


@router.post(
    "/export/forecast",
    response_class=Response,
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}, "description": "Forecast workbook"},
        422: {"model": ErrorResponse, "description": "Result cannot be rendered"},
    },
    summary="Export a forecast result to Excel",
)
@export_rate_limit()
async def export_forecast(
    request: Request,
    payload: ForecastResponse,
    style: str = Query("basic", description="Style name"),
    colorway: str = Query("blue", description="Colorway name"),
) -> Response:
    """Render a forecast result (as returned by the forecast endpoints) to .xlsx."""
    workbook = ForecastWorkbookBuilder(style, colorway).build(payload.to_result())
    return xlsx_response(workbook_to_bytes(workbook), f"forecast-{payload.method}.xlsx")


@router.post(
    "/export/financials",
    response_class=Response,
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}, "description": "Financials workbook"}},
    summary="Export extracted financial figures to Excel",
)
@export_rate_limit()
async def export_financials(
    request: Request,
    payload: ExtractedFinancials,
    style: str = Query("basic", description="Style name"),
    colorway: str = Query("blue", description="Colorway name"),
) -> Response:
    """Render extracted figures (the `data` of the PDF extraction response) to .xlsx."""
    workbook = FinancialsWorkbookBuilder(style, colorway).build(
        payload.financial_data.model_dump(),
        payload.key_ratios,
        company=payload.company,
        period=payload.period,
    )
    return xlsx_response(workbook_to_bytes(workbook), "financials.xlsx")


@router.post(
    "/export/model/{model_type}",
    response_class=Response,
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}, "description": "Model workbook"},
        400: {"model": ErrorResponse, "description": "Invalid model parameters"},
        404: {"model": ErrorResponse, "description": "Unknown model type"},
    },
    summary="Build a DCF, LBO or merger model workbook",
)
@export_rate_limit()
async def export_model(
    request: Request,
    model_type: str,
    payload: Optional[Dict[str, Any]] = Body(None, description="Model parameters; omitted fields use defaults"),
    style: str = Query("basic", description="Style name"),
    colorway: str = Query("blue", description="Colorway name"),
) -> Response:
    """
    Build a live-formula model workbook.

    The body depends on the model type (see `DCFModelRequest`,
    `LBOModelRequest` and `MergerModelRequest`); an empty body builds the
    model with its default assumptions.
    """
    if model_type not in MODEL_EXPORTS:
        raise TemplateNotFoundError(model_type)
    schema, builder_class = MODEL_EXPORTS[model_type]

    try:
        parameters = schema.model_validate(payload or {})
    except PydanticValidationError as exc:
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        raise ValidationError("Invalid model parameters", errors=errors) from exc

    workbook = builder_class(style, colorway).build(parameters.to_assumptions())
    logger.info("Model exported", model_type=model_type, style=style, colorway=colorway)
    return xlsx_response(workbook_to_bytes(workbook), f"{model_type}-model.xlsx")
