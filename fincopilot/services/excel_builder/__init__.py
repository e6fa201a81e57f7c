"""
Excel workbook generation for forecasts, extracted financial figures and
DCF/LBO/merger models.
"""
from fincopilot.services.excel_builder.builder import (
    XLSX_MEDIA_TYPE,
    FinancialsWorkbookBuilder,
    ForecastWorkbookBuilder,
    workbook_to_bytes,
)
from fincopilot.services.excel_builder.financial_models import (
    DCFAssumptions,
    DCFWorkbookBuilder,
    LBOAssumptions,
    LBOWorkbookBuilder,
    MergerAssumptions,
    MergerWorkbookBuilder,
)
from fincopilot.services.excel_builder.styles import COLORWAYS, STYLES

__all__ = [
    "XLSX_MEDIA_TYPE",
    "FinancialsWorkbookBuilder",
    "ForecastWorkbookBuilder",
    "workbook_to_bytes",
    "DCFAssumptions",
    "DCFWorkbookBuilder",
    "LBOAssumptions",
    "LBOWorkbookBuilder",
    "MergerAssumptions",
    "MergerWorkbookBuilder",
    "COLORWAYS",
    "STYLES",
]
