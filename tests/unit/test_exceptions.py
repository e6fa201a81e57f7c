"""
Unit tests for custom exceptions.

Tests exception hierarchy and error formatting.
"""
import pytest

from fincopilot.exceptions import (
    DocumentProcessingError,
    ExportError,
    FileTooLargeError,
    FinCopilotError,
    InvalidFileTypeError,
    NumericDegeneracyError,
    TemplateNotFoundError,
    UnsupportedMethodError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Tests for exception class hierarchy."""

    def test_base_exception(self):
        """Test base FinCopilotError."""
        exc = FinCopilotError("Test error")

        assert exc.error_code == "FCP-000"
        assert exc.message == "Test error"
        assert exc.http_status == 500
        assert str(exc) == "Test error"

    @pytest.mark.parametrize(
        "exc, code, status",
        [
            (ValidationError("bad"), "FCP-700", 400),
            (UnsupportedMethodError("holt-winters", supported=["linear"]), "FCP-701", 400),
            (NumericDegeneracyError(), "FCP-702", 422),
            (DocumentProcessingError(), "FCP-100", 422),
            (InvalidFileTypeError("a.txt", expected_types=[".pdf"]), "FCP-102", 400),
            (FileTooLargeError(30 * 1024 * 1024, 20 * 1024 * 1024), "FCP-103", 413),
            (ExportError(), "FCP-300", 422),
            (TemplateNotFoundError("npv"), "FCP-401", 404),
        ],
    )
    def test_codes_and_statuses(self, exc, code, status):
        """Each error carries its code and HTTP status."""
        assert isinstance(exc, FinCopilotError)
        assert exc.error_code == code
        assert exc.http_status == status

    def test_custom_error_code(self):
        """Error code can be overridden per instance."""
        exc = ExportError("boom", error_code="FCP-399")

        assert exc.error_code == "FCP-399"
        assert ExportError.error_code == "FCP-300"


class TestExceptionDetails:
    """Tests for exception payloads."""

    def test_to_dict(self):
        """Test to_dict uses the API error shape."""
        exc = NumericDegeneracyError("Series is constant", details={"method": "linear"})

        assert exc.to_dict() == {
            "error": "Series is constant",
            "error_code": "FCP-702",
            "details": {"method": "linear"},
        }

    def test_validation_error_collects_errors(self):
        """Field errors land under details.errors next to other details."""
        exc = ValidationError(
            "Invalid option",
            errors=[{"field": "alpha"}],
            details={"hint": "use 0.3"},
        )

        assert exc.details == {"hint": "use 0.3", "errors": [{"field": "alpha"}]}

    def test_validation_error_defaults(self):
        """No field errors gives an empty list."""
        assert ValidationError().details == {"errors": []}

    def test_unsupported_method_message(self):
        """The message names the rejected method."""
        exc = UnsupportedMethodError("holt-winters", supported=["linear", "arima"])

        assert exc.message == 'Forecasting method "holt-winters" not supported'
        assert exc.details["supported"] == ["linear", "arima"]

    def test_file_too_large_message(self):
        """The limit is reported in megabytes."""
        exc = FileTooLargeError(30 * 1024 * 1024, 20 * 1024 * 1024)

        assert "20MB" in exc.message
        assert exc.details["size"] == 30 * 1024 * 1024

    def test_template_not_found(self):
        """The unknown template type is kept in details."""
        exc = TemplateNotFoundError("npv")

        assert exc.message == "Template not found"
        assert exc.details == {"template_type": "npv"}
