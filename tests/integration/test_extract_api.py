"""
Integration tests for PDF extraction and workbook export endpoints.
"""
import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from fincopilot.services.excel_builder import XLSX_MEDIA_TYPE
from fincopilot.services.pdf_extractor import PDFExtractor


class TestExtractPdfEndpoint:
    """Tests for POST /api/v1/extract-pdf."""

    def test_extracts_figures(self, client: TestClient, monkeypatch, statement_text: str):
        """Figures scraped from the text layer are returned with the page count."""

        def fake_extract(self, pdf_bytes):
            result = self.extract_from_text(statement_text)
            result.page_count = 3
            return result

        monkeypatch.setattr(PDFExtractor, "extract", fake_extract)

        response = client.post(
            "/api/v1/extract-pdf",
            files={"pdf": ("report.pdf", b"%PDF-1.4 stub", "application/pdf")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["pageCount"] == 3
        assert data["data"]["company"] == "Acme Widgets Inc."
        assert data["data"]["financial_data"]["income_statement"]["revenue"] == 1_200_000.0
        assert data["data"]["metadata"]["documentType"] == "annual_report"

    def test_rejects_non_pdf(self, client: TestClient):
        response = client.post(
            "/api/v1/extract-pdf",
            files={"pdf": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "FCP-102"

    def test_rejects_missing_magic(self, client: TestClient):
        """A .pdf name is not enough."""
        response = client.post(
            "/api/v1/extract-pdf",
            files={"pdf": ("fake.pdf", b"not really a pdf", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "FCP-102"

    def test_rejects_large_file(self, client: TestClient, monkeypatch):
        from fincopilot.config import get_settings

        monkeypatch.setattr(get_settings(), "max_upload_size_mb", 0)
        response = client.post(
            "/api/v1/extract-pdf",
            files={"pdf": ("big.pdf", b"%PDF-1.4 data", "application/pdf")},
        )

        assert response.status_code == 413
        assert response.json()["error_code"] == "FCP-103"

    def test_missing_file(self, client: TestClient):
        response = client.post("/api/v1/extract-pdf")

        assert response.status_code == 400


class TestExportEndpoints:
    """Tests for the workbook export endpoints."""

    def test_export_forecast(self, client: TestClient):
        forecast = client.post(
            "/api/v1/forecast",
            json={"historicalData": [1, 3, 5, 7, 9], "forecastPeriod": 2},
        ).json()

        response = client.post("/api/v1/export/forecast?style=corporate&colorway=green", json=forecast)

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        assert "forecast-linear.xlsx" in response.headers["content-disposition"]

        sheet = load_workbook(io.BytesIO(response.content))["Forecast"]
        assert sheet["B9"].value == "Forecast"
        assert sheet["C9"].value == pytest.approx(11.0)

    def test_export_forecast_mismatch(self, client: TestClient):
        body = {
            "method": "linear",
            "historicalData": [1, 2, 3],
            "forecast": [4, 5],
            "predictionIntervals": [{"lower": 3, "upper": 5}],
            "statistics": {},
        }

        response = client.post("/api/v1/export/forecast", json=body)

        assert response.status_code == 422
        assert response.json()["error_code"] == "FCP-300"

    def test_export_forecast_non_scalar_statistic(self, client: TestClient):
        """A statistic that cannot fill one cell is rejected before the workbook is built."""
        body = {
            "method": "arima",
            "historicalData": [1, 2, 3],
            "forecast": [4],
            "predictionIntervals": [{"lower": 3, "upper": 5}],
            "statistics": {"coefficients": [0.7, 0.3]},
        }

        response = client.post("/api/v1/export/forecast", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "FCP-700"
        assert any("statistics" in error["field"] for error in data["details"]["errors"])

    def test_export_financials(self, client: TestClient):
        body = {
            "company": "Acme Inc.",
            "period": "FY 2023",
            "financial_data": {
                "income_statement": {"revenue": 1000, "net_income": 100},
                "cash_flow": {"operating_cash_flow": 50},
            },
            "key_ratios": {"profit_margin": 0.1},
        }

        response = client.post("/api/v1/export/financials", json=body)

        assert response.status_code == 200
        workbook = load_workbook(io.BytesIO(response.content))
        assert workbook.sheetnames == ["Income Statement", "Balance Sheet", "Cash Flow", "Key Ratios"]
        assert workbook["Income Statement"]["B3"].value == 1000

    def test_export_options(self, client: TestClient):
        data = client.get("/api/v1/export/options").json()

        assert "basic" in data["styles"]
        assert "blue" in data["colorways"]


class TestModelExportEndpoint:
    """Tests for POST /api/v1/export/model/{model_type}."""

    def test_dcf_model(self, client: TestClient):
        response = client.post(
            "/api/v1/export/model/dcf",
            json={"companyName": "Acme Inc.", "baseYear": 2024, "historicalRevenue": [900, 1000], "projectionYears": 3},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        assert "dcf-model.xlsx" in response.headers["content-disposition"]
        sheet = load_workbook(io.BytesIO(response.content))["DCF Model"]
        assert sheet["A1"].value == "Acme Inc. - Discounted Cash Flow (DCF) Model"
        assert sheet["C11"].value == "FY 2024"
        assert sheet["B37"].value == "=SUM(D35:F35)"

    def test_defaults_without_body(self, client: TestClient):
        response = client.post("/api/v1/export/model/lbo")

        assert response.status_code == 200
        sheet = load_workbook(io.BytesIO(response.content))["LBO Model"]
        assert sheet["B6"].value == 1000

    def test_merger_wire_names(self, client: TestClient):
        """EPS and share counts use the task pane's field names."""
        response = client.post(
            "/api/v1/export/model/merger?style=corporate&colorway=green",
            json={"acquirerName": "Big Co", "acquirerEPS": 4.25, "targetShares": 40},
        )

        assert response.status_code == 200
        sheet = load_workbook(io.BytesIO(response.content))["Merger Model"]
        assert sheet["A1"].value == "Big Co / Target Corp - Merger Model"
        assert sheet["B12"].value == 4.25
        assert sheet["C8"].value == 40

    def test_unknown_model_type(self, client: TestClient):
        response = client.post("/api/v1/export/model/custom", json={})

        assert response.status_code == 404
        assert response.json()["error_code"] == "FCP-401"

    def test_invalid_parameter(self, client: TestClient):
        response = client.post("/api/v1/export/model/lbo", json={"projectionYears": 0})

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "FCP-700"
        assert data["details"]["errors"][0]["field"] == "projectionYears"

    def test_perpetual_growth_must_trail_discount_rate(self, client: TestClient):
        response = client.post(
            "/api/v1/export/model/dcf",
            json={"discountRate": 0.05, "perpetualGrowthRate": 0.05},
        )

        assert response.status_code == 400

    def test_non_object_body(self, client: TestClient):
        response = client.post("/api/v1/export/model/dcf", json=[1, 2])

        assert response.status_code == 400
