"""
Custom exceptions for FinCopilot.

Provides a hierarchy of exceptions with error codes for consistent error handling.
"""
from typing import Optional, Dict, Any


class FinCopilotError(Exception):
    """
    Base exception for all FinCopilot errors.

    Attributes:
        error_code: Unique error code (e.g., FCP-001)
        message: Human-readable error message
        details: Additional error context
    """
    error_code: str = "FCP-000"
    http_status: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


# Document Processing Errors (FCP-1XX)
class DocumentProcessingError(FinCopilotError):
    """Error while reading an uploaded document."""
    error_code = "FCP-100"
    http_status = 422

    def __init__(self, message: str = "Failed to extract data from PDF", **kwargs):
        super().__init__(message, **kwargs)


class InvalidFileTypeError(FinCopilotError):
    """Invalid file type uploaded."""
    error_code = "FCP-102"
    http_status = 400

    def __init__(self, filename: str, expected_types: list, **kwargs):
        message = f"Invalid file type. Expected: {', '.join(expected_types)}"
        super().__init__(message, details={"filename": filename, "expected_types": expected_types}, **kwargs)


class FileTooLargeError(FinCopilotError):
    """File exceeds maximum size limit."""
    error_code = "FCP-103"
    http_status = 413

    def __init__(self, size: int, max_size: int, **kwargs):
        message = f"File too large. Maximum size: {max_size // (1024*1024)}MB"
        super().__init__(message, details={"size": size, "max_size": max_size}, **kwargs)


# Export Errors (FCP-3XX)
class ExportError(FinCopilotError):
    """Error while rendering a workbook."""
    error_code = "FCP-300"
    http_status = 422

    def __init__(self, message: str = "Failed to build workbook", **kwargs):
        super().__init__(message, **kwargs)


# Template Errors (FCP-4XX)
class TemplateNotFoundError(FinCopilotError):
    """Financial model template not found."""
    error_code = "FCP-401"
    http_status = 404

    def __init__(self, template_type: str, **kwargs):
        message = "Template not found"
        super().__init__(message, details={"template_type": template_type}, **kwargs)


# Forecasting Errors (FCP-7XX)
class ValidationError(FinCopilotError):
    """Input validation failed."""
    error_code = "FCP-700"
    http_status = 400

    def __init__(self, message: str = "Validation failed", errors: list = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        details["errors"] = errors or []
        super().__init__(message, details=details, **kwargs)


class UnsupportedMethodError(FinCopilotError):
    """Forecasting method is not one of the recognized selectors."""
    error_code = "FCP-701"
    http_status = 400

    def __init__(self, method: Any, supported: list, **kwargs):
        message = f'Forecasting method "{method}" not supported'
        super().__init__(message, details={"method": method, "supported": supported}, **kwargs)


class NumericDegeneracyError(FinCopilotError):
    """Computation hit a zero denominator, zero variance or a non-finite value."""
    error_code = "FCP-702"
    http_status = 422

    def __init__(self, message: str = "Forecast is numerically degenerate for this series", **kwargs):
        super().__init__(message, **kwargs)
