"""
Pydantic schemas for PDF extraction and financials export.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class IncomeStatement(BaseModel):
    revenue: Optional[float] = None
    cost_of_revenue: Optional[float] = None
    gross_profit: Optional[float] = None
    operating_expenses: Optional[float] = None
    operating_income: Optional[float] = None
    net_income: Optional[float] = None


class BalanceSheet(BaseModel):
    total_assets: Optional[float] = None
    total_liabilities: Optional[float] = None
    total_equity: Optional[float] = None
    cash: Optional[float] = None


class CashFlow(BaseModel):
    operating_cash_flow: Optional[float] = None
    investing_cash_flow: Optional[float] = None
    financing_cash_flow: Optional[float] = None


class FinancialData(BaseModel):
    """Figures grouped by statement."""

    income_statement: IncomeStatement = Field(default_factory=IncomeStatement)
    balance_sheet: BalanceSheet = Field(default_factory=BalanceSheet)
    cash_flow: CashFlow = Field(default_factory=CashFlow)


class ExtractionMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_count: int = Field(..., alias="pageCount")
    document_type: str = Field(..., alias="documentType")
    extraction_timestamp: str = Field(..., alias="extractionTimestamp")


class ExtractedFinancials(BaseModel):
    """Figures scraped from one filing."""

    company: Optional[str] = None
    period: Optional[str] = None
    financial_data: FinancialData = Field(default_factory=FinancialData)
    key_ratios: Dict[str, float] = Field(default_factory=dict)
    tables: List[List[List[str]]] = Field(default_factory=list)
    metadata: Optional[ExtractionMetadata] = None


class ExtractPdfResponse(BaseModel):
    """Response model for PDF extraction."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    page_count: int = Field(..., alias="pageCount")
    data: ExtractedFinancials
