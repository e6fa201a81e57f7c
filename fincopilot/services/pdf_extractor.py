"""
Financial figure extraction from PDF filings.

Reads the text layer with pdfplumber and picks headline figures (revenue,
net income, total assets, ...) out of it with regular expressions. This is a
text scrape, not a layout-aware table parser: the first match for each label
wins and figures that cannot be found are reported as None.
"""
import io
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pdfplumber
import structlog

from fincopilot.exceptions import DocumentProcessingError

logger = structlog.get_logger(__name__)

AMOUNT = r"[\s:]*\$?(\d[\d,]*(?:\.\d+)?)"

MONTHS = (
    r"Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?"
    r"|Aug(?:ust)?|Sep(?:tember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?"
)

# Statement section -> field -> pattern; group 1 is the amount
FIGURE_PATTERNS: Dict[str, Dict[str, re.Pattern]] = {
    "income_statement": {
        "revenue": re.compile(r"(?:revenue|sales|net\s+sales)" + AMOUNT, re.I),
        "cost_of_revenue": re.compile(
            r"(?:cost\s+of\s+(?:revenue|sales|goods\s+sold)|cogs)" + AMOUNT, re.I
        ),
        "gross_profit": re.compile(r"(?:gross\s+profit|gross\s+margin)" + AMOUNT, re.I),
        "operating_expenses": re.compile(r"(?:operating\s+expenses|total\s+expenses)" + AMOUNT, re.I),
        "operating_income": re.compile(
            r"(?:operating\s+income|operating\s+profit|ebit)" + AMOUNT, re.I
        ),
        "net_income": re.compile(r"(?:net\s+income|net\s+earnings|net\s+profit)" + AMOUNT, re.I),
    },
    "balance_sheet": {
        "total_assets": re.compile(r"total\s+assets" + AMOUNT, re.I),
        "total_liabilities": re.compile(r"total\s+liabilities" + AMOUNT, re.I),
        "total_equity": re.compile(
            r"(?:(?:total\s+|total\s+shareholders['’]?\s+)?equity|net\s+assets)" + AMOUNT, re.I
        ),
        "cash": re.compile(r"cash(?:\s+and\s+cash\s+equivalents)?" + AMOUNT, re.I),
    },
    "cash_flow": {
        "operating_cash_flow": re.compile(
            r"(?:net\s+)?cash\s+(?:provided\s+by|from)\s+operating\s+activities" + AMOUNT, re.I
        ),
        "investing_cash_flow": re.compile(
            r"(?:net\s+)?cash\s+(?:used\s+in|provided\s+by|from)\s+investing\s+activities" + AMOUNT,
            re.I,
        ),
        "financing_cash_flow": re.compile(
            r"(?:net\s+)?cash\s+(?:used\s+in|provided\s+by|from)\s+financing\s+activities" + AMOUNT,
            re.I,
        ),
    },
}

COMPANY_PATTERN = re.compile(
    r"[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*(?:\s+[A-Z]+)?\s+(?:Inc\.?|Corp\.?|Corporation|Company|Co\.)"
)
PERIOD_PATTERN = re.compile(
    rf"(?:fiscal|year|period)[\s:]+(?:(?:ended|ending)\s+)?(?:(?:{MONTHS})\s+\d{{1,2}},?\s+)?\d{{4}}",
    re.I,
)

DOCUMENT_TYPE_PHRASES = {
    "income": re.compile(
        r"income statement|statement of income|statement of operations|profit and loss"
    ),
    "balance": re.compile(r"balance sheet|statement of financial position"),
    "cash_flow": re.compile(r"cash flow|statement of cash flows"),
    "annual_report": re.compile(r"annual report|yearly report"),
}

NUMBER_TOKEN = re.compile(r"[\d,.]+")
CELL_SEPARATOR = re.compile(r"\s{2,}")


@dataclass
class ExtractionResult:
    """Figures scraped from one document."""

    company: Optional[str]
    period: Optional[str]
    financial_data: Dict[str, Dict[str, Optional[float]]]
    key_ratios: Dict[str, float]
    tables: List[List[List[str]]] = field(default_factory=list)
    page_count: int = 0
    document_type: str = "unknown"
    extracted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "period": self.period,
            "financial_data": self.financial_data,
            "key_ratios": self.key_ratios,
            "tables": self.tables,
            "metadata": {
                "pageCount": self.page_count,
                "documentType": self.document_type,
                "extractionTimestamp": self.extracted_at.isoformat(),
            },
        }


class PDFExtractor:
    """
    Extracts headline financial figures from PDF text.

    Usage:
        result = get_pdf_extractor().extract(pdf_bytes)
    """

    def extract(self, pdf_bytes: bytes) -> ExtractionResult:
        """
        Read a PDF and scrape its figures.

        Raises:
            DocumentProcessingError: If pdfplumber cannot read the document.
        """
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                page_count = len(pdf.pages)
                text = "\n".join(page.extract_text() or "" for page in pdf.pages)
        except Exception as e:
            logger.error("PDF text extraction failed", error=str(e), error_type=type(e).__name__)
            raise DocumentProcessingError(details={"reason": str(e)}) from e

        result = self.extract_from_text(text)
        result.page_count = page_count

        logger.info(
            "PDF figures extracted",
            page_count=page_count,
            document_type=result.document_type,
            figures_found=sum(
                value is not None
                for section in result.financial_data.values()
                for value in section.values()
            ),
        )
        return result

    def extract_from_text(self, text: str) -> ExtractionResult:
        """Scrape figures, derived metrics, document type and tables from plain text."""
        company = COMPANY_PATTERN.search(text)
        period = PERIOD_PATTERN.search(text)

        financial_data = {
            section: {name: self._find_amount(text, pattern) for name, pattern in patterns.items()}
            for section, patterns in FIGURE_PATTERNS.items()
        }
        key_ratios = self.derive_metrics(financial_data)

        return ExtractionResult(
            company=company.group(0) if company else None,
            period=period.group(0) if period else None,
            financial_data=financial_data,
            key_ratios=key_ratios,
            tables=self.extract_tables(text),
            document_type=self.identify_document_type(text),
        )

    @staticmethod
    def _find_amount(text: str, pattern: re.Pattern) -> Optional[float]:
        match = pattern.search(text)
        if not match:
            return None
        return float(match.group(1).replace(",", ""))

    @staticmethod
    def derive_metrics(financial_data: Dict[str, Dict[str, Optional[float]]]) -> Dict[str, float]:
        """
        Fill total equity from assets - liabilities when missing and compute ratios.

        Ratios are only reported when both operands are present and non-zero.
        Mutates ``financial_data["balance_sheet"]`` in place.
        """
        income = financial_data["income_statement"]
        balance = financial_data["balance_sheet"]

        if not balance["total_equity"] and balance["total_assets"] and balance["total_liabilities"]:
            balance["total_equity"] = balance["total_assets"] - balance["total_liabilities"]

        ratios = {}
        if income["revenue"] and income["net_income"]:
            ratios["profit_margin"] = income["net_income"] / income["revenue"]
        if income["net_income"] and balance["total_assets"]:
            ratios["return_on_assets"] = income["net_income"] / balance["total_assets"]
        if income["net_income"] and balance["total_equity"]:
            ratios["return_on_equity"] = income["net_income"] / balance["total_equity"]
        if balance["total_liabilities"] and balance["total_equity"]:
            ratios["debt_to_equity"] = balance["total_liabilities"] / balance["total_equity"]
        return ratios

    @staticmethod
    def identify_document_type(text: str) -> str:
        """Classify the filing by counting statement title phrases."""
        lowered = text.lower()
        counts = {name: len(pattern.findall(lowered)) for name, pattern in DOCUMENT_TYPE_PHRASES.items()}
        income, balance, cash_flow = counts["income"], counts["balance"], counts["cash_flow"]

        if counts["annual_report"] > 0:
            return "annual_report"
        if income > balance and income > cash_flow:
            return "income_statement"
        if balance > income and balance > cash_flow:
            return "balance_sheet"
        if cash_flow > income and cash_flow > balance:
            return "cash_flow_statement"
        if income > 0 and balance > 0 and cash_flow > 0:
            return "financial_statements"
        return "unknown"

    @staticmethod
    def extract_tables(text: str) -> List[List[List[str]]]:
        """
        Group consecutive lines that carry three or more numeric tokens.

        Cells are split on runs of two or more spaces; a block needs more than
        one row to count as a table.
        """
        tables = []
        current: Optional[List[List[str]]] = None

        for raw_line in text.split("\n"):
            line = raw_line.strip()
            if not line:
                continue

            if len(NUMBER_TOKEN.findall(line)) >= 3:
                if current is None:
                    current = []
                cells = [cell for cell in CELL_SEPARATOR.split(line) if cell.strip()]
                if len(cells) >= 2:
                    current.append(cells)
            elif current is not None:
                if len(current) > 1:
                    tables.append(current)
                current = None

        if current and len(current) > 1:
            tables.append(current)

        return tables


# Singleton instance
_extractor_instance: Optional[PDFExtractor] = None


def get_pdf_extractor() -> PDFExtractor:
    """Get singleton PDFExtractor instance."""
    global _extractor_instance
    if _extractor_instance is None:
        _extractor_instance = PDFExtractor()
    return _extractor_instance
