"""
CogniTutor - Document API Endpoints
Text extraction from uploaded files.
"""
from fastapi import APIRouter, File, HTTPException, UploadFile, status

from cognitutor.api.deps import CurrentUserId, Extractor
from cognitutor.ai.document_extractor import (
    DocumentExtractor,
    EmptyDocument,
    ExtractionError,
    ExtractionFailed,
    UnsupportedFormat,
)
from cognitutor.core.config import settings
from cognitutor.schemas.chat import ExtractedTextResponse


router = APIRouter(prefix="/documents", tags=["Documents"])


EXTRACTION_STATUS = {
    UnsupportedFormat: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    EmptyDocument: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ExtractionFailed: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


async def extract_upload(file: UploadFile, extractor: DocumentExtractor) -> tuple[str, str, str]:
    """
    Read and extract an uploaded file.

    Returns:
        (file name, normalized text, MIME type)

    Raises:
        HTTPException: 413 for oversized files, 415/422 for extraction errors.
    """
    filename = file.filename or "unknown"
    content = await file.read()

    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size: {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB",
        )

    mime_type = file.content_type or "application/octet-stream"
    try:
        text = await extractor.extract_async(content, filename, mime_type)
    except ExtractionError as e:
        raise HTTPException(
            status_code=EXTRACTION_STATUS.get(type(e), status.HTTP_422_UNPROCESSABLE_ENTITY),
            detail={"error": e.kind, "message": e.message},
        )
    return filename, text, mime_type


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/extract", response_model=ExtractedTextResponse)
async def extract_document(
    user_id: CurrentUserId,
    extractor: Extractor,
    file: UploadFile = File(...),
):
    """
    Extract normalized text from a .txt, .pdf or .docx upload.

    The full extracted text is returned; the context cap is applied only
    when a document is attached to a chat session.
    """
    name, text, _ = await extract_upload(file, extractor)
    return ExtractedTextResponse(name=name, content=text)
