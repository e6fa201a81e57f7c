"""
Workbook builders for forecast results and extracted financial figures.

These produce the same cell layout the task pane writes into the open
workbook, as a downloadable .xlsx file.
"""
import io
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from openpyxl import Workbook
from openpyxl.cell import Cell
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from fincopilot.exceptions import ExportError
from fincopilot.services.excel_builder.styles import (
    CURRENCY_FORMAT,
    MULTIPLE_FORMAT,
    PERCENT_FORMAT,
    StyleConfig,
    resolve_style,
)
from fincopilot.services.forecasting import ForecastResult

logger = structlog.get_logger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def workbook_to_bytes(workbook: Workbook) -> bytes:
    """Serialize a workbook to .xlsx bytes."""
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class WorkbookBuilder:
    """Shared cell-writing helpers."""

    LABEL_WIDTH = 32
    VALUE_WIDTH = 16

    def __init__(self, style: str = "basic", colorway: str = "blue"):
        self.style_name = style
        self.colorway_name = colorway
        self.style: StyleConfig = resolve_style(style, colorway)

    def _write_title(self, sheet: Worksheet, title: str, width: int) -> None:
        sheet.cell(row=1, column=1, value=title).font = self.style.title_font
        if width > 1:
            sheet.merge_cells(start_row=1, start_column=1, end_row=1, end_column=width)

    def _write_header(
        self, sheet: Worksheet, row: int, labels: Sequence[str], start_column: int = 1
    ) -> None:
        for column, label in enumerate(labels, start=start_column):
            cell = sheet.cell(row=row, column=column, value=label)
            cell.font = self.style.header_font
            if self.style.header_fill:
                cell.fill = self.style.header_fill
            if self.style.header_border:
                cell.border = self.style.header_border

    def _write_section(self, sheet: Worksheet, row: int, label: str, width: int) -> None:
        for column in range(1, width + 1):
            cell = sheet.cell(row=row, column=column, value=label if column == 1 else None)
            cell.font = self.style.section_font
            if self.style.section_fill:
                cell.fill = self.style.section_fill

    def _write_label(self, sheet: Worksheet, row: int, label: Any) -> Cell:
        cell = sheet.cell(row=row, column=1, value=label)
        cell.font = self.style.item_font
        if self.style.label_alignment:
            cell.alignment = self.style.label_alignment
        return cell

    def _write_value(
        self, sheet: Worksheet, row: int, column: int, value: Any, number_format: str = CURRENCY_FORMAT
    ) -> Cell:
        cell = sheet.cell(row=row, column=column, value=value)
        cell.font = self.style.item_font
        cell.number_format = number_format
        if self.style.value_alignment:
            cell.alignment = self.style.value_alignment
        return cell

    def _emphasize(self, cell: Cell, highlight: bool = False) -> Cell:
        """Bold a cell; highlighted cells also get the colorway's highlight fill."""
        cell.font = Font(bold=True, size=self.style.item_font.size)
        if highlight and self.style.highlight_fill:
            cell.fill = self.style.highlight_fill
        return cell

    def _set_widths(self, sheet: Worksheet, columns: int) -> None:
        sheet.column_dimensions["A"].width = self.LABEL_WIDTH
        for column in range(2, columns + 1):
            sheet.column_dimensions[get_column_letter(column)].width = self.VALUE_WIDTH


class ForecastWorkbookBuilder(WorkbookBuilder):
    """
    Renders a ForecastResult as a "Forecast" sheet.

    Layout: title in row 1, a Period / Type / Value / Lower / Upper table
    starting at row 3 (history first, then forecast rows), and a Statistics
    block two rows below the table.
    """

    SHEET_NAME = "Forecast"
    HEADERS = ("Period", "Type", "Value", "Lower", "Upper")
    HEADER_ROW = 3

    def build(self, result: ForecastResult, title: Optional[str] = None) -> Workbook:
        if len(result.forecast) != len(result.prediction_intervals):
            raise ExportError(
                "Forecast and prediction intervals differ in length",
                details={
                    "forecast": len(result.forecast),
                    "predictionIntervals": len(result.prediction_intervals),
                },
            )

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.SHEET_NAME
        width = len(self.HEADERS)

        self._write_title(sheet, title or f"Forecast ({result.method})", width)
        self._write_header(sheet, self.HEADER_ROW, self.HEADERS)

        row = self.HEADER_ROW + 1
        for period, value in enumerate(result.historical_data, start=1):
            self._write_label(sheet, row, period)
            sheet.cell(row=row, column=2, value="Historical")
            self._write_value(sheet, row, 3, value)
            row += 1

        first_future = len(result.historical_data) + 1
        for offset, (value, interval) in enumerate(zip(result.forecast, result.prediction_intervals)):
            self._write_label(sheet, row, first_future + offset)
            sheet.cell(row=row, column=2, value="Forecast")
            cells = [
                self._write_value(sheet, row, 3, value),
                self._write_value(sheet, row, 4, interval.lower),
                self._write_value(sheet, row, 5, interval.upper),
            ]
            if self.style.forecast_fill:
                for cell in cells:
                    cell.fill = self.style.forecast_fill
            row += 1

        row += 1
        self._write_section(sheet, row, "Statistics", width)
        for name, value in result.statistics.items():
            if value is not None and not isinstance(value, (int, float, str)):
                raise ExportError(
                    f"Statistic '{name}' cannot be written to a single cell",
                    details={"statistic": name, "type": type(value).__name__},
                )
            row += 1
            self._write_label(sheet, row, name)
            self._write_value(sheet, row, 3, value, number_format="General")

        self._set_widths(sheet, width)
        sheet.freeze_panes = sheet.cell(row=self.HEADER_ROW + 1, column=1)

        logger.info(
            "Forecast workbook built",
            method=result.method,
            historical_rows=len(result.historical_data),
            forecast_rows=len(result.forecast),
        )
        return workbook


# Sheet name -> rows of (label, section, field); section None marks a computed row
FINANCIAL_SHEETS: Dict[str, List[Tuple[str, Optional[str], Optional[str]]]] = {
    "Income Statement": [
        ("Revenue", "income_statement", "revenue"),
        ("Cost of Revenue", "income_statement", "cost_of_revenue"),
        ("Gross Profit", "income_statement", "gross_profit"),
        ("Operating Expenses", "income_statement", "operating_expenses"),
        ("Operating Income", "income_statement", "operating_income"),
        ("Net Income", "income_statement", "net_income"),
    ],
    "Balance Sheet": [
        ("Cash", "balance_sheet", "cash"),
        ("Total Assets", "balance_sheet", "total_assets"),
        ("Total Liabilities", "balance_sheet", "total_liabilities"),
        ("Total Equity", "balance_sheet", "total_equity"),
    ],
    "Cash Flow": [
        ("Operating Cash Flow", "cash_flow", "operating_cash_flow"),
        ("Investing Cash Flow", "cash_flow", "investing_cash_flow"),
        ("Financing Cash Flow", "cash_flow", "financing_cash_flow"),
        ("Net Change in Cash", None, None),
    ],
}

KEY_RATIOS: List[Tuple[str, str, str]] = [
    ("Profit Margin", "profit_margin", PERCENT_FORMAT),
    ("Return on Assets", "return_on_assets", PERCENT_FORMAT),
    ("Return on Equity", "return_on_equity", PERCENT_FORMAT),
    ("Debt to Equity", "debt_to_equity", MULTIPLE_FORMAT),
]


class FinancialsWorkbookBuilder(WorkbookBuilder):
    """
    Renders extracted figures as Income Statement, Balance Sheet, Cash Flow
    and Key Ratios sheets. Missing figures are left blank; Net Change in Cash
    is a SUM formula over the three cash flow lines.
    """

    FIRST_DATA_ROW = 3

    def build(
        self,
        financial_data: Dict[str, Dict[str, Optional[float]]],
        key_ratios: Dict[str, Optional[float]],
        company: Optional[str] = None,
        period: Optional[str] = None,
    ) -> Workbook:
        workbook = Workbook()
        workbook.remove(workbook.active)
        heading = f"{company or 'Unknown Company'} - {period or 'Unknown Period'}"

        for sheet_name, rows in FINANCIAL_SHEETS.items():
            sheet = workbook.create_sheet(sheet_name)
            self._write_title(sheet, f"{sheet_name}: {heading}", 2)

            row = self.FIRST_DATA_ROW
            for label, section, field_name in rows:
                self._write_label(sheet, row, label)
                if section is None:
                    first, last = self.FIRST_DATA_ROW, row - 1
                    self._emphasize(self._write_value(sheet, row, 2, f"=SUM(B{first}:B{last})"))
                else:
                    self._write_value(sheet, row, 2, financial_data.get(section, {}).get(field_name))
                row += 1
            self._set_widths(sheet, 2)

        ratios = workbook.create_sheet("Key Ratios")
        self._write_title(ratios, f"Key Ratios: {heading}", 2)
        for offset, (label, key, number_format) in enumerate(KEY_RATIOS):
            row = self.FIRST_DATA_ROW + offset
            self._write_label(ratios, row, label)
            self._write_value(ratios, row, 2, key_ratios.get(key), number_format=number_format)
        self._set_widths(ratios, 2)

        logger.info("Financials workbook built", company=company, sheets=workbook.sheetnames)
        return workbook
