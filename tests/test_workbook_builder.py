"""
Tests for the forecast, financials and financial model workbook builders.
"""
import io

import pytest
from openpyxl import load_workbook

from fincopilot.exceptions import ExportError, ValidationError
from fincopilot.services.excel_builder import (
    COLORWAYS,
    STYLES,
    DCFAssumptions,
    DCFWorkbookBuilder,
    FinancialsWorkbookBuilder,
    ForecastWorkbookBuilder,
    LBOAssumptions,
    LBOWorkbookBuilder,
    MergerAssumptions,
    MergerWorkbookBuilder,
    workbook_to_bytes,
)
from fincopilot.services.excel_builder.styles import resolve_style
from fincopilot.services.forecasting import ForecastResult, PredictionInterval


@pytest.fixture
def forecast_result() -> ForecastResult:
    return ForecastResult(
        method="linear",
        historical_data=[10.0, 12.0, 14.0],
        forecast=[16.0, 18.0],
        prediction_intervals=[
            PredictionInterval(lower=15.0, upper=17.0),
            PredictionInterval(lower=16.5, upper=19.5),
        ],
        statistics={"slope": 2.0, "intercept": 8.0},
    )


@pytest.fixture
def financial_data() -> dict:
    return {
        "income_statement": {
            "revenue": 1000.0,
            "cost_of_revenue": 600.0,
            "gross_profit": 400.0,
            "operating_expenses": None,
            "operating_income": None,
            "net_income": 100.0,
        },
        "balance_sheet": {
            "total_assets": 2000.0,
            "total_liabilities": 500.0,
            "total_equity": 1500.0,
            "cash": 250.0,
        },
        "cash_flow": {
            "operating_cash_flow": 300.0,
            "investing_cash_flow": -120.0,
            "financing_cash_flow": -80.0,
        },
    }


def reload(workbook):
    return load_workbook(io.BytesIO(workbook_to_bytes(workbook)))


class TestForecastWorkbookBuilder:
    """Tests for ForecastWorkbookBuilder."""

    def test_layout(self, forecast_result: ForecastResult):
        """History rows precede forecast rows under a header at row 3."""
        sheet = reload(ForecastWorkbookBuilder().build(forecast_result))["Forecast"]

        assert sheet["A1"].value == "Forecast (linear)"
        assert [cell.value for cell in sheet[3]] == ["Period", "Type", "Value", "Lower", "Upper"]
        assert [sheet["A4"].value, sheet["B4"].value, sheet["C4"].value] == [1, "Historical", 10.0]
        assert sheet["D4"].value is None
        assert [cell.value for cell in sheet[7]] == [4, "Forecast", 16.0, 15.0, 17.0]
        assert [cell.value for cell in sheet[8]] == [5, "Forecast", 18.0, 16.5, 19.5]

    def test_statistics_block(self, forecast_result: ForecastResult):
        sheet = reload(ForecastWorkbookBuilder().build(forecast_result))["Forecast"]

        assert sheet["A10"].value == "Statistics"
        assert (sheet["A11"].value, sheet["C11"].value) == ("slope", 2.0)
        assert (sheet["A12"].value, sheet["C12"].value) == ("intercept", 8.0)

    def test_custom_title(self, forecast_result: ForecastResult):
        workbook = ForecastWorkbookBuilder().build(forecast_result, title="Revenue outlook")

        assert workbook["Forecast"]["A1"].value == "Revenue outlook"

    def test_frozen_header(self, forecast_result: ForecastResult):
        workbook = ForecastWorkbookBuilder().build(forecast_result)

        assert workbook["Forecast"].freeze_panes == "A4"

    def test_mismatched_intervals(self, forecast_result: ForecastResult):
        """Forecast and intervals must line up."""
        forecast_result.prediction_intervals.pop()

        with pytest.raises(ExportError):
            ForecastWorkbookBuilder().build(forecast_result)

    def test_non_scalar_statistic(self, forecast_result: ForecastResult):
        """Each statistic must fit in a single cell."""
        forecast_result.statistics["coefficients"] = [0.7, 0.3]

        with pytest.raises(ExportError) as exc_info:
            ForecastWorkbookBuilder().build(forecast_result)

        assert exc_info.value.details == {"statistic": "coefficients", "type": "list"}

    @pytest.mark.parametrize("style", sorted(STYLES))
    @pytest.mark.parametrize("colorway", sorted(COLORWAYS))
    def test_every_style_builds(self, forecast_result: ForecastResult, style, colorway):
        content = workbook_to_bytes(ForecastWorkbookBuilder(style, colorway).build(forecast_result))

        assert content[:2] == b"PK"


class TestFinancialsWorkbookBuilder:
    """Tests for FinancialsWorkbookBuilder."""

    def test_sheets(self, financial_data):
        workbook = FinancialsWorkbookBuilder().build(financial_data, {})

        assert workbook.sheetnames == ["Income Statement", "Balance Sheet", "Cash Flow", "Key Ratios"]

    def test_income_statement_values(self, financial_data):
        workbook = reload(FinancialsWorkbookBuilder().build(financial_data, {}, company="Acme Inc.", period="FY 2023"))
        sheet = workbook["Income Statement"]

        assert sheet["A1"].value == "Income Statement: Acme Inc. - FY 2023"
        assert (sheet["A3"].value, sheet["B3"].value) == ("Revenue", 1000.0)
        assert sheet["B6"].value is None
        assert (sheet["A8"].value, sheet["B8"].value) == ("Net Income", 100.0)

    def test_net_change_in_cash_formula(self, financial_data):
        sheet = reload(FinancialsWorkbookBuilder().build(financial_data, {}))["Cash Flow"]

        assert sheet["A6"].value == "Net Change in Cash"
        assert sheet["B6"].value == "=SUM(B3:B5)"

    def test_key_ratios(self, financial_data):
        workbook = FinancialsWorkbookBuilder().build(financial_data, {"profit_margin": 0.1})
        sheet = workbook["Key Ratios"]

        assert (sheet["A3"].value, sheet["B3"].value) == ("Profit Margin", 0.1)
        assert sheet["B3"].number_format == "0.0%"
        assert sheet["B4"].value is None

    def test_unknown_heading(self, financial_data):
        workbook = FinancialsWorkbookBuilder().build(financial_data, {})

        assert workbook["Balance Sheet"]["A1"].value == "Balance Sheet: Unknown Company - Unknown Period"


class TestResolveStyle:
    """Tests for style lookup."""

    def test_unknown_names_fall_back(self):
        style = resolve_style("nope", "nope")

        assert style.name == "Basic - Blue"


class TestDCFWorkbookBuilder:
    """Tests for DCFWorkbookBuilder."""

    @pytest.fixture
    def sheet(self):
        assumptions = DCFAssumptions(historical_revenue=(100.0, 110.0, 121.0), base_year=2024)
        return reload(DCFWorkbookBuilder().build(assumptions))["DCF Model"]

    def test_title_and_assumptions(self, sheet):
        assert sheet["A1"].value == "Sample Company - Discounted Cash Flow (DCF) Model"
        assert "A1:G1" in {str(cells) for cells in sheet.merged_cells.ranges}
        assert [sheet.cell(row=row, column=2).value for row in range(4, 10)] == [0.05, 0.25, 0.25, 0.1, 0.02, 8.0]
        assert sheet["B4"].number_format == "0.0%"
        assert sheet["B9"].number_format == "0.0"

    def test_year_headers(self, sheet):
        """Historical years end at the base year; projections follow it."""
        headers = [sheet.cell(row=11, column=column).value for column in range(2, 10)]

        assert headers == ["FY 2021", "FY 2022", "FY 2023", "FY 2025", "FY 2026", "FY 2027", "FY 2028", "FY 2029"]
        assert sheet["B10"].value == "Historical"
        assert sheet["E10"].value == "Projection"

    def test_historical_columns(self, sheet):
        assert [sheet["B13"].value, sheet["C13"].value, sheet["D13"].value] == [100.0, 110.0, 121.0]
        assert sheet["B14"].value is None
        assert sheet["C14"].value == "=(C13/B13-1)"
        assert sheet["B15"].value == "=B13*0.25"
        assert sheet["B20"].value == "=IF(B18>0,B18*$B$6,0)"
        assert sheet["B27"].value == 0
        assert sheet["C27"].value == "=(C13-B13)*0.15"
        assert sheet["D28"].value == "=D24+D25-D26-D27"

    def test_projection_columns(self, sheet):
        """Projections grow revenue at the assumption cell and apply the margin cell."""
        assert sheet["E13"].value == "=D13*(1+$B$4)"
        assert sheet["E14"].value == "=(E13/D13)-1"
        assert sheet["E15"].value == "=E13*$B$5"
        assert sheet["I17"].value == "=I13*0.05"
        assert sheet["I26"].value == "=I13*0.1"

    def test_valuation(self, sheet):
        """Mid-year discounting over the projection columns E:I."""
        assert sheet["E32"].value == "=E28"
        assert [sheet.cell(row=33, column=column).value for column in range(5, 10)] == [0.5, 1.5, 2.5, 3.5, 4.5]
        assert sheet["E34"].value == "=1/POWER(1+$B$7,E33)"
        assert sheet["E35"].value == "=E32*E34"
        assert sheet["B37"].value == "=SUM(E35:I35)"
        assert sheet["B38"].value == "=I15*(1+$B$8)"
        assert sheet["C38"].value == "=$B38*$B$9"
        assert sheet["D38"].value == "=I28*(1+$B$8)/(($B$7-$B$8))"
        assert sheet["B39"].value == "=$C$38*I34"
        assert sheet["B41"].value == "=$B$37+$B$39"
        assert sheet["B42"].value == 0
        assert sheet["B43"].value == "=$B$41-$B$42"

    def test_labels(self, sheet):
        assert sheet["A13"].value == "Revenue"
        assert sheet["A28"].value == "Unlevered Free Cash Flow"
        assert sheet["A43"].value == "Equity Value"
        assert sheet["C39"].value == "Exit Multiple Method"

    def test_key_outputs_highlighted(self, sheet):
        for coordinate in ("B41", "B43"):
            assert sheet[coordinate].font.bold
            assert sheet[coordinate].fill.fgColor.rgb.endswith("E3F2FD")

    def test_seeded_history(self):
        """Simulated history grows 8-12% a year at 20-30% EBITDA margins."""
        first = DCFAssumptions(seed=7).history()
        second = DCFAssumptions(seed=7).history()

        assert first == second
        assert first[0][0] == 1000.0
        for (previous, _), (current, _) in zip(first, first[1:]):
            assert 1.08 <= current / previous <= 1.12
        assert all(0.2 <= margin <= 0.3 for _, margin in first)

    def test_supplied_history_sets_year_count(self):
        workbook = DCFWorkbookBuilder().build(DCFAssumptions(historical_revenue=(50.0, 60.0), projection_years=2))
        sheet = workbook["DCF Model"]

        assert sheet["C13"].value == 60.0
        assert sheet["D13"].value == "=C13*(1+$B$4)"
        assert sheet["B37"].value == "=SUM(D35:E35)"

    def test_invalid_years(self):
        with pytest.raises(ValidationError):
            DCFAssumptions(projection_years=0)


class TestLBOWorkbookBuilder:
    """Tests for LBOWorkbookBuilder."""

    @pytest.fixture
    def sheet(self):
        return reload(LBOWorkbookBuilder().build())["LBO Model"]

    def test_transaction_structure(self, sheet):
        """Debt is 4x LTM EBITDA of 125; equity funds the rest."""
        assert sheet["A1"].value == "Target Company - Leveraged Buyout (LBO) Model"
        assert sheet["B6"].value == 1000.0
        assert sheet["B7"].value == pytest.approx(125.0)
        assert (sheet["A11"].value, sheet["B11"].value) == ("  Debt", pytest.approx(500.0))
        assert (sheet["A12"].value, sheet["B12"].value) == ("  Equity", pytest.approx(500.0))
        assert sheet["B13"].value == "=SUM(B11:B12)"
        assert (sheet["A15"].value, sheet["B15"].value) == ("  Purchase Equity", 1000.0)

    def test_projection_labels_align_with_values(self, sheet):
        assert (sheet["A22"].value, sheet["A24"].value, sheet["A28"].value) == (
            "Revenue",
            "EBITDA",
            "Interest Expense",
        )
        assert sheet["A31"].value == "Net Income"
        assert sheet["A38"].value == "Free Cash Flow to Equity"

    def test_entry_year(self, sheet):
        assert sheet["B19"].value == "Year 0"
        assert sheet["G19"].value == "Year 5"
        assert sheet["B22"].value == pytest.approx(1000 / 8 / 0.3)
        assert sheet["B23"].value == "--"
        assert sheet["B24"].value == "=B22*0.3"
        assert sheet["B28"].value == "=B45"
        assert sheet["B36"].value == 0
        assert sheet["B38"].value == "=B33+B34-B35-B36-B37"

    def test_projection_years(self, sheet):
        assert sheet["C22"].value == "=B22*(1+0.05)"
        assert sheet["C23"].value == "=(C22/B22)-1"
        assert sheet["C30"].value == "=IF(C29>0,C29*0.25,0)"
        assert sheet["C36"].value == "=(C22-B22)*0.1"
        assert sheet["G37"].value == "=G24*0.5"

    def test_debt_schedule(self, sheet):
        """Each year opens at the previous ending balance."""
        assert sheet["B41"].value == pytest.approx(500.0)
        assert sheet["B42"].value == "=B37"
        assert sheet["C41"].value == "=B44"
        assert sheet["G44"].value == "=G41-G42+G43"
        assert sheet["G45"].value == "=G41*0.06"

    def test_returns(self, sheet):
        assert sheet["B48"].value == "=G24"
        assert sheet["B49"].value == 9.0
        assert sheet["B51"].value == "=G44"
        assert sheet["B53"].value == "=B12"
        assert sheet["B54"].value == "=B52/B53"
        assert sheet["B54"].number_format == '0.0"x"'
        assert sheet["B55"].value == "=IRR(B57:G57)"
        assert sheet["B55"].number_format == "0.0%"

    def test_equity_cash_flows(self, sheet):
        """Equity goes in at entry and comes out at exit, nothing in between."""
        flows = [sheet.cell(row=57, column=column).value for column in range(2, 8)]

        assert flows == ["=-B53", 0, 0, 0, 0, "=B52"]
        assert sheet["A57"].value == "Equity Cash Flows"

    def test_single_projection_year(self):
        sheet = LBOWorkbookBuilder().build(LBOAssumptions(projection_years=1))["LBO Model"]

        assert sheet["B55"].value == "=IRR(B57:C57)"
        assert sheet["C57"].value == "=B52"

    def test_key_outputs_highlighted(self, sheet):
        assert sheet["B54"].font.bold and sheet["B55"].font.bold
        assert sheet["B55"].fill.fgColor.rgb.endswith("E3F2FD")

    def test_invalid_entry_multiple(self):
        with pytest.raises(ValidationError) as exc_info:
            LBOAssumptions(entry_multiple=0)

        assert exc_info.value.details["errors"][0]["field"] == "entry_multiple"


class TestMergerWorkbookBuilder:
    """Tests for MergerWorkbookBuilder."""

    @pytest.fixture
    def workbook(self):
        return MergerWorkbookBuilder().build()

    def test_company_information(self, workbook):
        sheet = reload(workbook)["Merger Model"]

        assert sheet["A1"].value == "Acquirer Corp / Target Corp - Merger Model"
        assert [sheet["B4"].value, sheet["C4"].value, sheet["D4"].value] == ["Acquirer", "Target", "Pro Forma"]
        assert [sheet["B5"].value, sheet["C5"].value] == [50.0, 30.0]
        assert sheet["B6"].value == "--"
        assert sheet["C7"].value == "=C5*(1+C6)"
        assert sheet["B13"].value == "=B5/B12"
        assert sheet["D10"].value == "=B10+C10+B21"
        assert sheet["D12"].value == "=B38"
        assert sheet["D5"].value is None

    def test_transaction_details(self, workbook):
        sheet = workbook["Merger Model"]

        assert sheet["B18"].value == "=C7*C8"
        assert sheet["B19"].value == 0.4
        assert sheet["B23"].value == "=B22/(B5*C8)"
        assert sheet["B26"].value == "=B8+B24"

    def test_pro_forma(self, workbook):
        sheet = workbook["Merger Model"]

        assert sheet["B32"].value == "=B31*0.25"
        assert sheet["B34"].value == "=B21*0.05"
        assert sheet["B37"].value == "=B29+B30+B33-B36"
        assert sheet["B38"].value == "=B37/B26"
        assert sheet["B40"].value == "=B39/B12"
        assert sheet["B40"].number_format == "0.0%"

    def test_accretion_colors(self, workbook):
        """B40 turns green when accretive and red when dilutive."""
        sheet = workbook["Merger Model"]
        rules = {
            rule.operator: rule.dxf.font.color.rgb
            for formatting in sheet.conditional_formatting
            if str(formatting.sqref) == "B40"
            for rule in formatting.rules
        }

        assert rules["greaterThan"].endswith("107C10")
        assert rules["lessThan"].endswith("A4262C")

    def test_acquisition_debt_rate(self):
        sheet = MergerWorkbookBuilder().build(MergerAssumptions(acquisition_debt_rate=0.07))["Merger Model"]

        assert sheet["B34"].value == "=B21*0.07"

    @pytest.mark.parametrize("style", sorted(STYLES))
    def test_every_style_builds(self, style):
        content = workbook_to_bytes(MergerWorkbookBuilder(style, "slate").build())

        assert content[:2] == b"PK"
