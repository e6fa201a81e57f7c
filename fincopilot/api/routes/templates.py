"""
Financial model template descriptors.
"""
from typing import Dict, List

from fastapi import APIRouter
from pydantic import BaseModel

from fincopilot.exceptions import TemplateNotFoundError
from fincopilot.schemas.forecast import ErrorResponse

router = APIRouter()


class ModelTemplate(BaseModel):
    """Name and section outline of a financial model."""

    name: str
    sections: List[str]


MODEL_TEMPLATES: Dict[str, ModelTemplate] = {
    "dcf": ModelTemplate(
        name="Discounted Cash Flow Model",
        sections=[
            "Assumptions",
            "Income Statement Projections",
            "Cash Flow Projections",
            "Discount Rate Calculation",
            "Terminal Value",
            "Valuation Summary",
        ],
    ),
    "lbo": ModelTemplate(
        name="Leveraged Buyout Model",
        sections=[
            "Transaction Assumptions",
            "Purchase Price Calculation",
            "Debt and Financing Structure",
            "Income Statement Projections",
            "Debt Schedule",
            "Returns Analysis",
        ],
    ),
    "merger": ModelTemplate(
        name="Merger Model",
        sections=[
            "Acquirer Information",
            "Target Information",
            "Transaction Details",
            "Pro Forma Analysis",
            "Accretion/Dilution Analysis",
            "Synergy Analysis",
        ],
    ),
    "custom": ModelTemplate(
        name="Custom Financial Model",
        sections=[
            "Model Assumptions",
            "Revenue Projections",
            "Expense Projections",
            "Capital Structure",
            "Free Cash Flow Analysis",
            "Valuation",
        ],
    ),
}


@router.get(
    "/model-templates/{template_type}",
    response_model=ModelTemplate,
    responses={404: {"model": ErrorResponse, "description": "Unknown template"}},
    summary="Get a financial model template outline",
)
async def get_model_template(template_type: str) -> ModelTemplate:
    template = MODEL_TEMPLATES.get(template_type)
    if template is None:
        raise TemplateNotFoundError(template_type)
    return template
