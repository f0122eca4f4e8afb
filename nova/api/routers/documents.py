"""
Document API endpoints.

Routes: POST /add-document

Dependencies: nova.application.services.document_service, nova.api.deps
System role: Document HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from nova.api.deps import get_document_service, get_session
from nova.application.services.document_service import DocumentService
from nova.core.exceptions import ValidationError
from nova.core.session.session_manager import Session
from nova.models.document import DocumentUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


@router.post("/add-document", response_model=DocumentUploadResponse)
async def add_document(
    file: UploadFile | None = File(default=None),
    session: Session = Depends(get_session),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentUploadResponse:
    """
    Upload one PDF, DOCX, PPTX or text file and add it to the session corpus.

    Args:
        file: Multipart file field
        session: Requesting session
        document_service: Injected document service

    Returns:
        DocumentUploadResponse: Confirmation with the stored filename
    """
    if file is None:
        raise ValidationError("No file uploaded.", field="file")

    # One byte past the limit is enough to reject without buffering the rest
    content = await file.read(document_service.settings.max_file_size + 1)
    await file.close()

    logger.info(
        "Document upload received",
        extra={
            "session_id": session.session_id,
            "file_name": file.filename,
            "content_type": file.content_type,
        },
    )

    result = await document_service.upload(
        session,
        content=content,
        media_type=file.content_type,
        filename=file.filename,
    )
    return DocumentUploadResponse(filename=result.filename)
