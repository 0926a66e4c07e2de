"""PDF reading with pypdf.

Validates uploaded bytes and reads page count, text and metadata so a
session can record what was attached.
"""

import io
import logging

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"

_METADATA_FIELDS = {
    "/Title": "title",
    "/Author": "author",
    "/Subject": "subject",
    "/Creator": "creator",
    "/Producer": "producer",
}


class PDFDocument(BaseModel):
    """Contents of an uploaded PDF.

    Attributes:
        pages: Total number of pages.
        text: Extracted text of all pages, separated by blank lines.
        metadata: Document info fields that were present.
    """

    pages: int = Field(ge=1)
    text: str
    metadata: dict[str, str] = Field(default_factory=dict)

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())


class PDFParseError(Exception):
    """Raised when an upload is not a readable PDF."""


def validate_pdf_bytes(file_content: bytes) -> None:
    """Reject empty, oversized or non-PDF content before parsing.

    Raises:
        PDFParseError: If validation fails.
    """
    if not file_content:
        raise PDFParseError("Empty file provided")

    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        raise PDFParseError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")


def _read_metadata(reader: PdfReader) -> dict[str, str]:
    if not reader.metadata:
        return {}

    metadata: dict[str, str] = {}
    for key, name in _METADATA_FIELDS.items():
        value = reader.metadata.get(key)
        if value:
            metadata[name] = str(value)
    return metadata


def _read_text(reader: PdfReader) -> str:
    parts: list[str] = []
    for number, page in enumerate(reader.pages, start=1):
        try:
            page_text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {number}: {e}")
            continue
        if page_text:
            parts.append(page_text)
    return "\n\n".join(parts)


def _open_reader(file_content: bytes) -> PdfReader:
    validate_pdf_bytes(file_content)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")
    return reader


def count_pages(file_content: bytes) -> int:
    """Validate a PDF and return its page count without extracting text.

    Raises:
        PDFParseError: Under the same conditions as read_pdf.
    """
    return len(_open_reader(file_content).pages)


def read_pdf(file_content: bytes) -> PDFDocument:
    """Validate and read a PDF.

    Args:
        file_content: Raw bytes of the upload.

    Returns:
        PDFDocument with page count, text and metadata.

    Raises:
        PDFParseError: If the file is empty, too large, not a PDF, corrupt,
            or has no pages.
    """
    reader = _open_reader(file_content)
    document = PDFDocument(
        pages=len(reader.pages), text=_read_text(reader), metadata=_read_metadata(reader)
    )
    if not document.has_text:
        logger.info("PDF contains no extractable text (may be scanned/image-based)")
    return document
