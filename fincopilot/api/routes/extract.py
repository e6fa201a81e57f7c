"""
PDF extraction API routes.
"""
import structlog
from fastapi import APIRouter, File, Request, UploadFile

from fincopilot.config import get_settings
from fincopilot.exceptions import FileTooLargeError, InvalidFileTypeError
from fincopilot.middleware.rate_limit import upload_rate_limit
from fincopilot.schemas.extract import ExtractedFinancials, ExtractPdfResponse
from fincopilot.schemas.forecast import ErrorResponse
from fincopilot.services.pdf_extractor import get_pdf_extractor

logger = structlog.get_logger(__name__)

router = APIRouter()

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}
PDF_MAGIC = b"%PDF"


def validate_pdf_upload(file: UploadFile, content: bytes) -> None:
    """
    Check the extension, content type, size and magic bytes of an upload.

    Raises:
        InvalidFileTypeError: If the file is not a PDF.
        FileTooLargeError: If the file exceeds the configured limit.
    """
    filename = file.filename or ""
    if file.content_type not in PDF_CONTENT_TYPES or not filename.lower().endswith(".pdf"):
        raise InvalidFileTypeError(filename, expected_types=[".pdf"])

    max_size = get_settings().max_upload_size_bytes
    if len(content) > max_size:
        raise FileTooLargeError(len(content), max_size)

    if not content.startswith(PDF_MAGIC):
        raise InvalidFileTypeError(filename, expected_types=[".pdf"])


@router.post(
    "/extract-pdf",
    response_model=ExtractPdfResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Not a PDF"},
        413: {"model": ErrorResponse, "description": "File too large"},
        422: {"model": ErrorResponse, "description": "PDF could not be read"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
    summary="Extract financial figures from a PDF",
    description="Upload a filing as multipart field `pdf` and get its headline figures.",
)
@upload_rate_limit()
async def extract_pdf(
    request: Request,
    pdf: UploadFile = File(..., description="PDF filing"),
) -> ExtractPdfResponse:
    """Scrape headline figures, ratios and numeric tables from an uploaded PDF."""
    content = await pdf.read()
    validate_pdf_upload(pdf, content)

    logger.info("PDF received", filename=pdf.filename, size=len(content))
    result = get_pdf_extractor().extract(content)

    return ExtractPdfResponse(
        success=True,
        page_count=result.page_count,
        data=ExtractedFinancials.model_validate(result.to_dict()),
    )
