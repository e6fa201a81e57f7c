"""
Pytest configuration and fixtures.
"""
import os
from typing import Generator, List

# Settings are read on first import of the app
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from fincopilot.main import app


@pytest.fixture(scope="function")
def client() -> Generator[TestClient, None, None]:
    """Create a test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def trending_series() -> List[float]:
    """Noisy upward trend, long enough for every method's defaults."""
    return [100.0, 104.0, 103.0, 109.0, 112.0, 111.0, 118.0, 121.0]


@pytest.fixture
def sample_pdf_content() -> bytes:
    """Generate simple PDF content for testing."""
    # Minimal valid PDF
    pdf_content = b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R >>
endobj
4 0 obj
<< /Length 44 >>
stream
BT /F1 12 Tf 100 700 Td (Revenue: $1,500,000) Tj ET
endstream
endobj
xref
0 5
0000000000 65535 f
0000000009 00000 n
0000000058 00000 n
0000000115 00000 n
0000000206 00000 n
trailer
<< /Size 5 /Root 1 0 R >>
startxref
300
%%EOF"""
    return pdf_content


@pytest.fixture
def statement_text() -> str:
    """Text layer of a small annual report."""
    return "\n".join([
        "Acme Widgets Inc. Annual Report",
        "For the fiscal year ended December 31, 2023",
        "Consolidated Statement of Income",
        "Revenue: $1,200,000",
        "Cost of Revenue: $700,000",
        "Gross Profit: $500,000",
        "Operating Expenses: $300,000",
        "Operating Income: $200,000",
        "Net Income: $150,000",
        "Balance Sheet",
        "Total Assets: $2,000,000",
        "Total Liabilities: $800,000",
        "Cash Flow",
        "Net cash provided by operating activities: $250,000",
        "Net cash used in investing activities: $90,000",
        "Net cash used in financing activities: $40,000",
        "",
        "Segment    2021    2022    2023",
        "Widgets    1,000    1,100    1,200",
        "Gadgets    400    450    500",
        "End of report",
    ])


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset global singleton instances before each test for proper isolation."""
    import fincopilot.services.pdf_extractor as extractor_module

    extractor_module._extractor_instance = None
    yield
    extractor_module._extractor_instance = None
