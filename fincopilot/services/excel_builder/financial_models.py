"""
DCF, LBO and merger model workbooks.

Each builder lays out one live-calculating sheet: assumptions are written as
values and everything downstream of them as Excel formulas, so a user can
change an input in the downloaded file and the model recalculates.
"""
import datetime
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import structlog
from openpyxl import Workbook
from openpyxl.formatting.rule import CellIsRule
from openpyxl.styles import Font
from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from fincopilot.exceptions import ValidationError
from fincopilot.services.excel_builder.builder import WorkbookBuilder
from fincopilot.services.excel_builder.styles import (
    DOLLAR_MILLIONS_FORMAT,
    FACTOR_FORMAT,
    MILLIONS_FORMAT,
    PERCENT_FORMAT,
    PRICE_FORMAT,
    RATIO_FORMAT,
    TIMES_FORMAT,
)

logger = structlog.get_logger(__name__)

# Simulated history when no revenue is supplied
HISTORICAL_GROWTH_RANGE = (0.08, 0.12)
HISTORICAL_MARGIN_RANGE = (0.20, 0.30)

ACCRETION_COLOR = "107C10"
DILUTION_COLOR = "A4262C"
NOTE_COLOR = "666666"


def _require_positive(record: Any, *names: str) -> None:
    errors = [
        {"field": name, "value": getattr(record, name)}
        for name in names
        if getattr(record, name) <= 0
    ]
    if errors:
        raise ValidationError("Model parameters must be positive", errors=errors)


@dataclass(frozen=True)
class DCFAssumptions:
    """Inputs of the discounted cash flow model."""

    company_name: str = "Sample Company"
    historical_years: int = 3
    projection_years: int = 5
    revenue_growth_rate: float = 0.05
    ebitda_margin: float = 0.25
    tax_rate: float = 0.25
    depreciation_rate: float = 0.05
    capex_percent_of_revenue: float = 0.10
    working_capital_percent_of_revenue: float = 0.15
    discount_rate: float = 0.10
    perpetual_growth_rate: float = 0.02
    exit_multiple: float = 8.0
    base_revenue: float = 1000.0
    historical_revenue: Optional[Tuple[float, ...]] = None
    base_year: Optional[int] = None
    seed: Optional[int] = None

    def __post_init__(self):
        _require_positive(self, "historical_years", "projection_years", "exit_multiple", "base_revenue")
        if self.historical_revenue is not None and not self.historical_revenue:
            raise ValidationError(
                "Historical revenue must contain at least one year",
                errors=[{"field": "historical_revenue"}],
            )

    def history(self) -> List[Tuple[float, float]]:
        """
        (revenue, EBITDA margin) per historical year, oldest first.

        Supplied revenue uses the EBITDA margin assumption. Otherwise revenue
        grows from ``base_revenue`` at 8-12% a year with 20-30% margins, drawn
        from ``numpy.random.default_rng(seed)``.
        """
        if self.historical_revenue is not None:
            return [(float(revenue), self.ebitda_margin) for revenue in self.historical_revenue]

        rng = np.random.default_rng(self.seed)
        history = []
        revenue = self.base_revenue
        for year in range(self.historical_years):
            growth = rng.uniform(*HISTORICAL_GROWTH_RANGE)
            if year > 0:
                revenue = revenue * (1 + growth)
            margin = rng.uniform(*HISTORICAL_MARGIN_RANGE)
            history.append((round(float(revenue), 2), round(float(margin), 4)))
        return history


@dataclass(frozen=True)
class LBOAssumptions:
    """Inputs of the leveraged buyout model."""

    company_name: str = "Target Company"
    purchase_price: float = 1000.0
    entry_multiple: float = 8.0
    projection_years: int = 5
    exit_multiple: float = 9.0
    debt_to_ebitda: float = 4.0
    interest_rate: float = 0.06
    tax_rate: float = 0.25
    revenue_growth_rate: float = 0.05
    ebitda_margin: float = 0.30
    capex_percent_of_revenue: float = 0.04
    depreciation_percent_of_revenue: float = 0.03
    working_capital_percent_of_revenue: float = 0.10
    debt_repayment_percent_of_ebitda: float = 0.50

    def __post_init__(self):
        _require_positive(
            self, "purchase_price", "entry_multiple", "projection_years", "exit_multiple", "ebitda_margin"
        )

    @property
    def ltm_ebitda(self) -> float:
        return self.purchase_price / self.entry_multiple

    @property
    def debt(self) -> float:
        return self.ltm_ebitda * self.debt_to_ebitda

    @property
    def equity(self) -> float:
        return self.purchase_price - self.debt

    @property
    def base_revenue(self) -> float:
        return self.ltm_ebitda / self.ebitda_margin


@dataclass(frozen=True)
class MergerAssumptions:
    """Inputs of the accretion/dilution merger model."""

    acquirer_name: str = "Acquirer Corp"
    target_name: str = "Target Corp"
    acquirer_share_price: float = 50.0
    target_share_price: float = 30.0
    acquirer_shares: float = 100.0
    target_shares: float = 50.0
    acquirer_net_debt: float = 500.0
    target_net_debt: float = 200.0
    acquirer_eps: float = 3.50
    target_eps: float = 2.00
    offer_premium: float = 0.30
    cash_consideration: float = 0.40
    synergies: float = 100.0
    tax_rate: float = 0.25
    transaction_fees: float = 50.0
    # Rate on the debt that funds the cash consideration
    acquisition_debt_rate: float = 0.05

    def __post_init__(self):
        _require_positive(self, "acquirer_share_price", "target_share_price", "acquirer_shares", "target_shares")


class FinancialModelBuilder(WorkbookBuilder):
    """Helpers shared by the model sheets."""

    SHEET_NAME = "Model"
    TITLE_WIDTH = 7

    def _new_sheet(self, title: str) -> Tuple[Workbook, Worksheet]:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.SHEET_NAME
        self._write_title(sheet, title, self.TITLE_WIDTH)
        return workbook, sheet

    def _write_labels(self, sheet: Worksheet, first_row: int, labels: Sequence[str]) -> None:
        """Labels down column A; names ending in ':' are sub-headings."""
        for row, label in enumerate(labels, start=first_row):
            if not label:
                continue
            if label.endswith(":"):
                self._emphasize(self._write_label(sheet, row, label[:-1]))
            else:
                self._write_label(sheet, row, label)

    def _write_note(self, sheet: Worksheet, row: int, column: int, text: str, color: Optional[str] = None) -> None:
        sheet.cell(row=row, column=column, value=text).font = Font(
            italic=True, size=self.style.item_font.size, color=color
        )


class DCFWorkbookBuilder(FinancialModelBuilder):
    """
    Renders a "DCF Model" sheet.

    Rows 4-9 hold the assumptions, rows 11-28 the historical and projected
    statements (one column per fiscal year), and rows 32-43 the valuation:
    mid-year discounting of unlevered free cash flow plus an exit-multiple
    terminal value, with the perpetuity-growth value shown alongside.
    """

    SHEET_NAME = "DCF Model"

    ASSUMPTIONS = (
        ("Revenue Growth Rate", "revenue_growth_rate", PERCENT_FORMAT),
        ("EBITDA Margin", "ebitda_margin", PERCENT_FORMAT),
        ("Tax Rate", "tax_rate", PERCENT_FORMAT),
        ("Discount Rate (WACC)", "discount_rate", PERCENT_FORMAT),
        ("Perpetual Growth Rate", "perpetual_growth_rate", PERCENT_FORMAT),
        ("Exit Multiple (EV/EBITDA)", "exit_multiple", RATIO_FORMAT),
    )
    STATEMENT_LABELS = (
        "Income Statement:",
        "Revenue",
        "Growth Rate",
        "EBITDA",
        "EBITDA Margin",
        "Depreciation & Amortization",
        "EBIT",
        "EBIT Margin",
        "Taxes",
        "NOPAT",
        "",
        "Cash Flow Statement:",
        "NOPAT",
        "Add: Depreciation & Amortization",
        "Less: Capital Expenditures",
        "Less: Change in Working Capital",
        "Unlevered Free Cash Flow",
    )
    VALUATION_LABELS = (
        "Unlevered Free Cash Flow",
        "Discount Period",
        "Discount Factor",
        "Present Value of FCF",
        "",
        "Sum of PV of FCF",
        "Terminal Value",
        "PV of Terminal Value",
        "",
        "Enterprise Value",
        "Less: Net Debt",
        "Equity Value",
    )
    PERCENT_ROWS = {14, 16, 19}

    def build(self, assumptions: Optional[DCFAssumptions] = None) -> Workbook:
        assumptions = assumptions or DCFAssumptions()
        history = assumptions.history()
        first_projection = 2 + len(history)
        last_column = first_projection + assumptions.projection_years - 1

        workbook, sheet = self._new_sheet(f"{assumptions.company_name} - Discounted Cash Flow (DCF) Model")

        self._write_section(sheet, 3, "Model Assumptions", last_column)
        for row, (label, name, number_format) in enumerate(self.ASSUMPTIONS, start=4):
            self._write_label(sheet, row, label)
            self._write_value(sheet, row, 2, getattr(assumptions, name), number_format=number_format)

        self._write_section(sheet, 10, "Historical & Projected Financials", last_column)
        sheet.cell(row=10, column=2, value="Historical")
        sheet.cell(row=10, column=first_projection, value="Projection")

        base_year = assumptions.base_year or datetime.date.today().year
        years = [f"FY {base_year - len(history) + i}" for i in range(len(history))]
        years += [f"FY {base_year + i + 1}" for i in range(assumptions.projection_years)]
        self._write_header(sheet, 11, years, start_column=2)
        self._write_labels(sheet, 12, self.STATEMENT_LABELS)

        for offset, (revenue, margin) in enumerate(history):
            column = 2 + offset
            letter = get_column_letter(column)
            previous = get_column_letter(column - 1) if offset else None
            self._write_value(sheet, 13, column, revenue, number_format=MILLIONS_FORMAT)
            if previous:
                self._write_value(sheet, 14, column, f"=({letter}13/{previous}13-1)", number_format=PERCENT_FORMAT)
            self._write_operating_rows(sheet, column, f"={letter}13*{margin}", previous, assumptions)

        for column in range(first_projection, last_column + 1):
            letter = get_column_letter(column)
            previous = get_column_letter(column - 1)
            self._write_value(sheet, 13, column, f"={previous}13*(1+$B$4)", number_format=MILLIONS_FORMAT)
            self._write_value(sheet, 14, column, f"=({letter}13/{previous}13)-1", number_format=PERCENT_FORMAT)
            self._write_operating_rows(sheet, column, f"={letter}13*$B$5", previous, assumptions)

        self._write_section(sheet, 30, "DCF Valuation", last_column)
        self._write_labels(sheet, 32, self.VALUATION_LABELS)
        self._write_valuation(sheet, first_projection, last_column)

        self._set_widths(sheet, last_column)
        logger.info(
            "DCF model built",
            company=assumptions.company_name,
            historical_years=len(history),
            projection_years=assumptions.projection_years,
        )
        return workbook

    def _write_operating_rows(
        self,
        sheet: Worksheet,
        column: int,
        ebitda_formula: str,
        previous: Optional[str],
        assumptions: DCFAssumptions,
    ) -> None:
        """Rows 15-28 of one year column, EBITDA down to unlevered free cash flow."""
        c = get_column_letter(column)
        working_capital = (
            f"=({c}13-{previous}13)*{assumptions.working_capital_percent_of_revenue}" if previous else 0
        )
        rows = {
            15: ebitda_formula,
            16: f"={c}15/{c}13",
            17: f"={c}13*{assumptions.depreciation_rate}",
            18: f"={c}15-{c}17",
            19: f"={c}18/{c}13",
            20: f"=IF({c}18>0,{c}18*$B$6,0)",
            21: f"={c}18-{c}20",
            24: f"={c}21",
            25: f"={c}17",
            26: f"={c}13*{assumptions.capex_percent_of_revenue}",
            27: working_capital,
            28: f"={c}24+{c}25-{c}26-{c}27",
        }
        for row, value in rows.items():
            number_format = PERCENT_FORMAT if row in self.PERCENT_ROWS else MILLIONS_FORMAT
            self._write_value(sheet, row, column, value, number_format=number_format)

    def _write_valuation(self, sheet: Worksheet, first_projection: int, last_column: int) -> None:
        start = get_column_letter(first_projection)
        end = get_column_letter(last_column)

        for year, column in enumerate(range(first_projection, last_column + 1)):
            c = get_column_letter(column)
            self._write_value(sheet, 32, column, f"={c}28", number_format=MILLIONS_FORMAT)
            # Mid-year convention
            self._write_value(sheet, 33, column, year + 0.5, number_format=RATIO_FORMAT)
            self._write_value(sheet, 34, column, f"=1/POWER(1+$B$7,{c}33)", number_format=FACTOR_FORMAT)
            self._write_value(sheet, 35, column, f"={c}32*{c}34", number_format=MILLIONS_FORMAT)

        cells = {
            "B37": f"=SUM({start}35:{end}35)",
            "B38": f"={end}15*(1+$B$8)",
            "C38": "=$B38*$B$9",
            "D38": f"={end}28*(1+$B$8)/(($B$7-$B$8))",
            "B39": f"=$C$38*{end}34",
            "B41": "=$B$37+$B$39",
            "B42": 0,
            "B43": "=$B$41-$B$42",
        }
        for coordinate, value in cells.items():
            cell = sheet[coordinate]
            self._write_value(sheet, cell.row, cell.column, value, number_format=MILLIONS_FORMAT)

        self._write_note(sheet, 38, 5, "<-- Terminal Value Calculations", color=NOTE_COLOR)
        self._write_note(sheet, 39, 3, "Exit Multiple Method")
        self._write_note(sheet, 39, 4, "Perpetuity Growth Method")

        self._emphasize(sheet["B41"], highlight=True)
        self._emphasize(sheet["B43"], highlight=True)


class LBOWorkbookBuilder(FinancialModelBuilder):
    """
    Renders an "LBO Model" sheet.

    Year 0 is the entry year in column B, followed by one column per
    projection year. Interest expense links to the debt schedule, debt is
    repaid from a fixed share of EBITDA, and the returns block derives the
    multiple of money and IRR on the sponsor's equity.
    """

    SHEET_NAME = "LBO Model"

    TRANSACTION_LABELS = (
        "Purchase Metrics:",
        "Purchase Price ($M)",
        "LTM EBITDA ($M)",
        "Entry Multiple (EV/EBITDA)",
        "Sources & Uses:",
        "Sources",
        "  Debt",
        "  Equity",
        "  Total Sources",
        "Uses",
        "  Purchase Equity",
    )
    PROJECTION_LABELS = (
        "Income Statement:",
        "Revenue",
        "Growth %",
        "EBITDA",
        "EBITDA Margin",
        "Depreciation & Amortization",
        "EBIT",
        "Interest Expense",
        "EBT",
        "Taxes",
        "Net Income",
        "Cash Flow:",
        "Net Income",
        "Add: Depreciation & Amortization",
        "Less: Capital Expenditures",
        "Less: Change in Working Capital",
        "Less: Debt Repayment",
        "Free Cash Flow to Equity",
    )
    DEBT_LABELS = ("Beginning Balance", "Repayments", "New Borrowings", "Ending Balance", "Interest Expense")
    RETURNS_LABELS = (
        "Exit Year EBITDA",
        "Exit Multiple",
        "Enterprise Value at Exit",
        "Exit Year Net Debt",
        "Implied Equity Value at Exit",
        "Initial Equity Investment",
        "Multiple of Money (MoM)",
        "Internal Rate of Return (IRR)",
        "",
        "Equity Cash Flows",
    )
    PERCENT_ROWS = {23, 25}

    def build(self, assumptions: Optional[LBOAssumptions] = None) -> Workbook:
        assumptions = assumptions or LBOAssumptions()
        exit_column = 2 + assumptions.projection_years
        width = max(exit_column, self.TITLE_WIDTH)

        workbook, sheet = self._new_sheet(f"{assumptions.company_name} - Leveraged Buyout (LBO) Model")

        self._write_section(sheet, 3, "Transaction Structure", width)
        self._emphasize(sheet.cell(row=4, column=2, value="Entry"))
        self._write_labels(sheet, 5, self.TRANSACTION_LABELS)
        transaction = {
            6: assumptions.purchase_price,
            7: assumptions.ltm_ebitda,
            8: assumptions.entry_multiple,
            11: assumptions.debt,
            12: assumptions.equity,
            13: "=SUM(B11:B12)",
            15: assumptions.purchase_price,
        }
        for row, value in transaction.items():
            self._write_value(sheet, row, 2, value, number_format=MILLIONS_FORMAT)

        self._write_section(sheet, 18, "Financial Projections", width)
        self._write_header(
            sheet, 19, [f"Year {year}" for year in range(assumptions.projection_years + 1)], start_column=2
        )
        self._write_labels(sheet, 21, self.PROJECTION_LABELS)
        for column in range(2, exit_column + 1):
            self._write_projection_column(sheet, column, assumptions)

        self._write_section(sheet, 40, "Debt Schedule", width)
        self._write_labels(sheet, 41, self.DEBT_LABELS)
        for column in range(2, exit_column + 1):
            self._write_debt_column(sheet, column, assumptions)

        self._write_section(sheet, 47, "Returns Analysis", width)
        self._write_labels(sheet, 48, self.RETURNS_LABELS)
        self._write_returns(sheet, exit_column, assumptions)

        self._set_widths(sheet, width)
        logger.info(
            "LBO model built",
            company=assumptions.company_name,
            purchase_price=assumptions.purchase_price,
            projection_years=assumptions.projection_years,
        )
        return workbook

    def _write_projection_column(self, sheet: Worksheet, column: int, assumptions: LBOAssumptions) -> None:
        c = get_column_letter(column)
        if column == 2:
            rows = {22: assumptions.base_revenue, 23: "--", 36: 0}
        else:
            p = get_column_letter(column - 1)
            rows = {
                22: f"={p}22*(1+{assumptions.revenue_growth_rate})",
                23: f"=({c}22/{p}22)-1",
                36: f"=({c}22-{p}22)*{assumptions.working_capital_percent_of_revenue}",
            }
        rows.update({
            24: f"={c}22*{assumptions.ebitda_margin}",
            25: f"={c}24/{c}22",
            26: f"={c}22*{assumptions.depreciation_percent_of_revenue}",
            27: f"={c}24-{c}26",
            28: f"={c}45",
            29: f"={c}27-{c}28",
            30: f"=IF({c}29>0,{c}29*{assumptions.tax_rate},0)",
            31: f"={c}29-{c}30",
            33: f"={c}31",
            34: f"={c}26",
            35: f"={c}22*{assumptions.capex_percent_of_revenue}",
            37: f"={c}24*{assumptions.debt_repayment_percent_of_ebitda}",
            38: f"={c}33+{c}34-{c}35-{c}36-{c}37",
        })
        for row, value in sorted(rows.items()):
            number_format = PERCENT_FORMAT if row in self.PERCENT_ROWS else MILLIONS_FORMAT
            self._write_value(sheet, row, column, value, number_format=number_format)

    def _write_debt_column(self, sheet: Worksheet, column: int, assumptions: LBOAssumptions) -> None:
        c = get_column_letter(column)
        opening = assumptions.debt if column == 2 else f"={get_column_letter(column - 1)}44"
        rows = {
            41: opening,
            42: f"={c}37",
            43: 0,
            44: f"={c}41-{c}42+{c}43",
            45: f"={c}41*{assumptions.interest_rate}",
        }
        for row, value in rows.items():
            self._write_value(sheet, row, column, value, number_format=MILLIONS_FORMAT)

    def _write_returns(self, sheet: Worksheet, exit_column: int, assumptions: LBOAssumptions) -> None:
        exit_letter = get_column_letter(exit_column)
        rows = {
            48: (f"={exit_letter}24", MILLIONS_FORMAT),
            49: (assumptions.exit_multiple, RATIO_FORMAT),
            50: ("=B48*B49", MILLIONS_FORMAT),
            51: (f"={exit_letter}44", MILLIONS_FORMAT),
            52: ("=B50-B51", MILLIONS_FORMAT),
            53: ("=B12", MILLIONS_FORMAT),
            54: ("=B52/B53", TIMES_FORMAT),
            55: (f"=IRR(B57:{exit_letter}57)", PERCENT_FORMAT),
        }
        for row, (value, number_format) in rows.items():
            self._write_value(sheet, row, 2, value, number_format=number_format)

        # No interim distributions: equity goes in at entry and comes out at exit
        for column in range(2, exit_column + 1):
            if column == 2:
                flow = "=-B53"
            elif column == exit_column:
                flow = "=B52"
            else:
                flow = 0
            self._write_value(sheet, 57, column, flow, number_format=MILLIONS_FORMAT)

        self._emphasize(sheet["B54"], highlight=True)
        self._emphasize(sheet["B55"], highlight=True)


class MergerWorkbookBuilder(FinancialModelBuilder):
    """
    Renders a "Merger Model" sheet: acquirer, target and pro forma company
    figures, the mix of cash and stock consideration, and pro forma EPS
    accretion or dilution (green when accretive, red when dilutive).
    """

    SHEET_NAME = "Merger Model"
    TITLE_WIDTH = 5

    COMPANY_LABELS = (
        "Share Price ($)",
        "Premium (%)",
        "Offer Price ($)",
        "Shares Outstanding (M)",
        "Market Capitalization ($M)",
        "Net Debt ($M)",
        "Enterprise Value ($M)",
        "EPS ($)",
        "P/E Ratio",
        "EV/EBITDA",
    )
    COMPANY_FORMATS = {
        5: PRICE_FORMAT,
        6: PERCENT_FORMAT,
        7: PRICE_FORMAT,
        8: MILLIONS_FORMAT,
        9: DOLLAR_MILLIONS_FORMAT,
        10: DOLLAR_MILLIONS_FORMAT,
        11: DOLLAR_MILLIONS_FORMAT,
        12: PRICE_FORMAT,
        13: RATIO_FORMAT,
        14: RATIO_FORMAT,
    }
    TRANSACTION_LABELS = (
        "Offer Price per Share ($)",
        "Equity Purchase Price ($M)",
        "% Cash Consideration",
        "% Stock Consideration",
        "Cash Consideration ($M)",
        "Stock Consideration ($M)",
        "Exchange Ratio (Target/Acquirer)",
        "New Shares Issued (M)",
        "Transaction Fees ($M)",
        "Pro Forma Shares Outstanding (M)",
    )
    PRO_FORMA_LABELS = (
        "Net Income - Acquirer ($M)",
        "Net Income - Target ($M)",
        "Synergies ($M)",
        "Tax Effect of Synergies ($M)",
        "After-Tax Synergies ($M)",
        "Incremental Interest Expense ($M)",
        "Tax Effect of Interest ($M)",
        "After-Tax Interest Expense ($M)",
        "Pro Forma Net Income ($M)",
        "Pro Forma EPS ($)",
        "Accretion / (Dilution) ($)",
        "Accretion / (Dilution) (%)",
    )

    def build(self, assumptions: Optional[MergerAssumptions] = None) -> Workbook:
        a = assumptions or MergerAssumptions()
        workbook, sheet = self._new_sheet(f"{a.acquirer_name} / {a.target_name} - Merger Model")

        self._write_section(sheet, 3, "Company Information", self.TITLE_WIDTH)
        for column, heading in enumerate(("Acquirer", "Target", "Pro Forma"), start=2):
            self._emphasize(sheet.cell(row=4, column=column, value=heading))
        self._write_labels(sheet, 5, self.COMPANY_LABELS)
        columns = {
            "B": [a.acquirer_share_price, "--", "--", a.acquirer_shares, "=B5*B8",
                  a.acquirer_net_debt, "=B9+B10", a.acquirer_eps, "=B5/B12", "--"],
            "C": [a.target_share_price, a.offer_premium, "=C5*(1+C6)", a.target_shares, "=C5*C8",
                  a.target_net_debt, "=C9+C10", a.target_eps, "=C5/C12", "--"],
            "D": [None, None, None, None, "=B9+C9", "=B10+C10+B21", "=D9+D10", "=B38", "=B5/D12", None],
        }
        for letter, values in columns.items():
            for row, value in enumerate(values, start=5):
                if value is not None:
                    self._write_value(
                        sheet, row, column_index_from_string(letter), value, number_format=self.COMPANY_FORMATS[row]
                    )

        self._write_section(sheet, 16, "Transaction Details", self.TITLE_WIDTH)
        self._write_labels(sheet, 17, self.TRANSACTION_LABELS)
        self._write_column_b(sheet, 17, [
            ("=C7", PRICE_FORMAT),
            ("=C7*C8", DOLLAR_MILLIONS_FORMAT),
            (a.cash_consideration, PERCENT_FORMAT),
            ("=1-B19", PERCENT_FORMAT),
            ("=B18*B19", DOLLAR_MILLIONS_FORMAT),
            ("=B18*B20", DOLLAR_MILLIONS_FORMAT),
            ("=B22/(B5*C8)", FACTOR_FORMAT),
            ("=B22/B5", MILLIONS_FORMAT),
            (a.transaction_fees, DOLLAR_MILLIONS_FORMAT),
            ("=B8+B24", MILLIONS_FORMAT),
        ])

        self._write_section(sheet, 28, "Pro Forma Analysis", self.TITLE_WIDTH)
        self._write_labels(sheet, 29, self.PRO_FORMA_LABELS)
        self._write_column_b(sheet, 29, [
            ("=B12*B8", DOLLAR_MILLIONS_FORMAT),
            ("=C12*C8", DOLLAR_MILLIONS_FORMAT),
            (a.synergies, DOLLAR_MILLIONS_FORMAT),
            (f"=B31*{a.tax_rate}", DOLLAR_MILLIONS_FORMAT),
            ("=B31-B32", DOLLAR_MILLIONS_FORMAT),
            (f"=B21*{a.acquisition_debt_rate}", DOLLAR_MILLIONS_FORMAT),
            (f"=B34*{a.tax_rate}", DOLLAR_MILLIONS_FORMAT),
            ("=B34-B35", DOLLAR_MILLIONS_FORMAT),
            ("=B29+B30+B33-B36", DOLLAR_MILLIONS_FORMAT),
            ("=B37/B26", PRICE_FORMAT),
            ("=B38-B12", PRICE_FORMAT),
            ("=B39/B12", PERCENT_FORMAT),
        ])

        for row in (38, 39, 40):
            self._emphasize(sheet.cell(row=row, column=2), highlight=True)
        sheet.conditional_formatting.add(
            "B40", CellIsRule(operator="greaterThan", formula=["0"], font=Font(color=ACCRETION_COLOR))
        )
        sheet.conditional_formatting.add(
            "B40", CellIsRule(operator="lessThan", formula=["0"], font=Font(color=DILUTION_COLOR))
        )

        self._set_widths(sheet, self.TITLE_WIDTH)
        logger.info("Merger model built", acquirer=a.acquirer_name, target=a.target_name)
        return workbook

    def _write_column_b(self, sheet: Worksheet, first_row: int, values: Sequence[Tuple[Any, str]]) -> None:
        for row, (value, number_format) in enumerate(values, start=first_row):
            self._write_value(sheet, row, 2, value, number_format=number_format)
