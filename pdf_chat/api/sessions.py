"""Session endpoints: list, create, fetch, delete, and PDF upload.

The upload handler validates the file the same way regardless of what the
session already holds; a new upload replaces the previous PDF.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, UploadFile, status

from pdf_chat.models.schemas import (
    CreateSessionRequest,
    CreateSessionResponse,
    PDFUploadResponse,
    Session,
    SessionDetailResponse,
    SessionListResponse,
)
from pdf_chat.parsing.pdf_parser import MAX_FILE_SIZE, PDFParseError, count_pages
from pdf_chat.storage.memory import InMemoryStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

# 10MB limit matches pdf_parser constant
MAX_UPLOAD_SIZE = MAX_FILE_SIZE


def _get_session_or_404(store: InMemoryStore, session_id: str) -> Session:
    session = store.get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return session


def _validate_file_extension(filename: str | None, content_type: str | None) -> str:
    """Validate that the upload is a PDF by extension or content type.

    Raises:
        HTTPException: 400 if the filename is missing or not a PDF.
    """
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    if not filename.lower().endswith(".pdf") and content_type != "application/pdf":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are allowed",
        )

    return filename


async def _read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
        )

    return content


@router.get("", response_model=SessionListResponse)
async def list_sessions(store: InMemoryStore = Depends(get_store)) -> SessionListResponse:
    """List sessions, most recently updated first."""
    return SessionListResponse(sessions=store.list_sessions())


@router.post("", response_model=CreateSessionResponse)
async def create_session(
    body: CreateSessionRequest | None = None,
    store: InMemoryStore = Depends(get_store),
) -> CreateSessionResponse:
    """Create a new, empty session."""
    title = body.title if body else None
    return CreateSessionResponse(session=store.create_session(title))


@router.get("/{session_id}", response_model=SessionDetailResponse)
async def get_session(
    session_id: str,
    store: InMemoryStore = Depends(get_store),
) -> SessionDetailResponse:
    """Fetch a session with its message history.

    Raises:
        404: Unknown session.
    """
    session = _get_session_or_404(store, session_id)
    return SessionDetailResponse(session=session, messages=store.list_messages(session_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    store: InMemoryStore = Depends(get_store),
) -> Response:
    """Delete a session and its messages.

    Raises:
        404: Unknown session.
    """
    if not store.delete_session(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/upload", response_model=PDFUploadResponse)
async def upload_pdf(
    session_id: str,
    file: UploadFile,
    store: InMemoryStore = Depends(get_store),
) -> PDFUploadResponse:
    """Attach a PDF to a session.

    Args:
        session_id: Target session.
        file: The uploaded PDF file (multipart/form-data).

    Returns:
        PDFUploadResponse with file name and page count.

    Raises:
        400: Not a PDF, empty, or corrupt.
        404: Unknown session.
        413: File exceeds 10MB limit.
    """
    _get_session_or_404(store, session_id)

    filename = _validate_file_extension(file.filename, file.content_type)
    content = await _read_and_validate_size(file)

    try:
        pages = count_pages(content)
    except PDFParseError as e:
        logger.warning(f"PDF parse error for {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    store.save_pdf(session_id, filename, pages)
    logger.info(f"Attached {filename} ({pages} pages) to session {session_id}")

    return PDFUploadResponse(success=True, file_name=filename, pages=pages)
