"""PDF handling for session uploads.

Responsibilities:
    - Upload validation (size, PDF header)
    - Page counting and text extraction with pypdf
    - Metadata extraction (title, author, ...)
"""

from pdf_chat.parsing.pdf_parser import (
    MAX_FILE_SIZE,
    PDFDocument,
    PDFParseError,
    count_pages,
    read_pdf,
    validate_pdf_bytes,
)

__all__ = [
    "MAX_FILE_SIZE",
    "PDFDocument",
    "PDFParseError",
    "count_pages",
    "read_pdf",
    "validate_pdf_bytes",
]
