"""
Pydantic schemas for the DCF, LBO and merger model exports.

Every field is optional on the wire; omitted fields take the model defaults.
Names are camelCase, as sent by the task pane.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from fincopilot.services.excel_builder import DCFAssumptions, LBOAssumptions, MergerAssumptions

DCF = DCFAssumptions()
LBO = LBOAssumptions()
MERGER = MergerAssumptions()


class ModelRequest(BaseModel):
    """Base for model parameter bodies."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DCFModelRequest(ModelRequest):
    company_name: str = Field(DCF.company_name, min_length=1, max_length=200)
    historical_years: int = Field(DCF.historical_years, ge=1, le=20)
    projection_years: int = Field(DCF.projection_years, ge=1, le=30)
    revenue_growth_rate: float = Field(DCF.revenue_growth_rate, gt=-1)
    ebitda_margin: float = Field(DCF.ebitda_margin, ge=-1, le=1)
    tax_rate: float = Field(DCF.tax_rate, ge=0, le=1)
    depreciation_rate: float = Field(DCF.depreciation_rate, ge=0)
    capex_percent_of_revenue: float = Field(DCF.capex_percent_of_revenue, ge=0)
    working_capital_percent_of_revenue: float = DCF.working_capital_percent_of_revenue
    discount_rate: float = Field(DCF.discount_rate, gt=-1)
    perpetual_growth_rate: float = DCF.perpetual_growth_rate
    exit_multiple: float = Field(DCF.exit_multiple, gt=0)
    base_revenue: float = Field(DCF.base_revenue, gt=0)
    historical_revenue: Optional[List[float]] = Field(
        None, min_length=1, max_length=20, description="Actual revenue, oldest first; replaces simulated history"
    )
    base_year: Optional[int] = Field(None, ge=1900, le=9999, description="Last historical fiscal year")
    seed: Optional[int] = Field(None, ge=0, description="Seed for simulated history")

    @model_validator(mode="after")
    def growth_below_discount_rate(self) -> "DCFModelRequest":
        if self.perpetual_growth_rate >= self.discount_rate:
            raise ValueError("perpetualGrowthRate must be below discountRate")
        return self

    def to_assumptions(self) -> DCFAssumptions:
        values = self.model_dump()
        if values["historical_revenue"] is not None:
            values["historical_revenue"] = tuple(values["historical_revenue"])
        return DCFAssumptions(**values)


class LBOModelRequest(ModelRequest):
    company_name: str = Field(LBO.company_name, min_length=1, max_length=200)
    purchase_price: float = Field(LBO.purchase_price, gt=0)
    entry_multiple: float = Field(LBO.entry_multiple, gt=0)
    projection_years: int = Field(LBO.projection_years, ge=1, le=30)
    exit_multiple: float = Field(LBO.exit_multiple, gt=0)
    debt_to_ebitda: float = Field(LBO.debt_to_ebitda, ge=0)
    interest_rate: float = Field(LBO.interest_rate, ge=0)
    tax_rate: float = Field(LBO.tax_rate, ge=0, le=1)
    revenue_growth_rate: float = Field(LBO.revenue_growth_rate, gt=-1)
    ebitda_margin: float = Field(LBO.ebitda_margin, gt=0, le=1)
    capex_percent_of_revenue: float = Field(LBO.capex_percent_of_revenue, ge=0)
    depreciation_percent_of_revenue: float = Field(LBO.depreciation_percent_of_revenue, ge=0)
    working_capital_percent_of_revenue: float = LBO.working_capital_percent_of_revenue
    debt_repayment_percent_of_ebitda: float = Field(
        LBO.debt_repayment_percent_of_ebitda, alias="debtRepaymentPercentOfEBITDA", ge=0, le=1
    )

    def to_assumptions(self) -> LBOAssumptions:
        return LBOAssumptions(**self.model_dump())


class MergerModelRequest(ModelRequest):
    acquirer_name: str = Field(MERGER.acquirer_name, min_length=1, max_length=200)
    target_name: str = Field(MERGER.target_name, min_length=1, max_length=200)
    acquirer_share_price: float = Field(MERGER.acquirer_share_price, gt=0)
    target_share_price: float = Field(MERGER.target_share_price, gt=0)
    acquirer_shares: float = Field(MERGER.acquirer_shares, gt=0)
    target_shares: float = Field(MERGER.target_shares, gt=0)
    acquirer_net_debt: float = MERGER.acquirer_net_debt
    target_net_debt: float = MERGER.target_net_debt
    acquirer_eps: float = Field(MERGER.acquirer_eps, alias="acquirerEPS")
    target_eps: float = Field(MERGER.target_eps, alias="targetEPS")
    offer_premium: float = Field(MERGER.offer_premium, gt=-1)
    cash_consideration: float = Field(MERGER.cash_consideration, ge=0, le=1)
    synergies: float = MERGER.synergies
    tax_rate: float = Field(MERGER.tax_rate, ge=0, le=1)
    transaction_fees: float = Field(MERGER.transaction_fees, ge=0)
    acquisition_debt_rate: float = Field(MERGER.acquisition_debt_rate, ge=0)

    def to_assumptions(self) -> MergerAssumptions:
        return MergerAssumptions(**self.model_dump())
