"""
CogniTutor - Document Extractor
Turns uploaded TXT, PDF and DOCX files into normalized text for chat context.
"""
import asyncio
import io
import logging
import re
from enum import Enum
from typing import Optional

from docx import Document as DocxDocument
from pypdf import PdfReader

from cognitutor.ai.core.telemetry import agent_span
from cognitutor.core.config import settings

logger = logging.getLogger(__name__)


TRUNCATION_MARKER = "\n\n[Content truncated due to length...]"


class DocumentFormat(str, Enum):
    """Formats the extractor can decode."""
    TEXT = "text"
    PDF = "pdf"
    DOCX = "docx"


SUFFIX_FORMATS = {
    ".txt": DocumentFormat.TEXT,
    ".pdf": DocumentFormat.PDF,
    ".docx": DocumentFormat.DOCX,
}


# =============================================================================
# ERRORS
# =============================================================================

class ExtractionError(Exception):
    """Base class for extraction failures reported back to the uploader."""
    kind = "extraction_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFormat(ExtractionError):
    kind = "unsupported_format"


class ExtractionFailed(ExtractionError):
    kind = "extraction_failed"


class EmptyDocument(ExtractionError):
    kind = "empty_document"


# =============================================================================
# NORMALIZATION
# =============================================================================

_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_HORIZONTAL_WHITESPACE = re.compile(r"[ \t]+")


def normalize_text(text: str) -> str:
    """Unify line endings, collapse blank-line and space runs, and trim."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    text = _HORIZONTAL_WHITESPACE.sub(" ", text)
    return text.strip()


def cap_content(text: str, max_chars: Optional[int] = None) -> str:
    """Truncate text to the chat context budget, marking the cut."""
    limit = max_chars or settings.DOCUMENT_CONTEXT_MAX_CHARS
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def detect_format(name: str, mime_type: Optional[str]) -> DocumentFormat:
    """
    Resolve the document format, checking the file name suffix before the MIME type.

    Raises:
        UnsupportedFormat: neither the suffix nor the MIME type is recognized.
    """
    lowered = (name or "").lower()
    for suffix, fmt in SUFFIX_FORMATS.items():
        if lowered.endswith(suffix):
            return fmt

    mime = (mime_type or "").lower()
    if mime == "text/plain":
        return DocumentFormat.TEXT
    if mime == "application/pdf":
        return DocumentFormat.PDF
    if "wordprocessingml" in mime:
        return DocumentFormat.DOCX

    raise UnsupportedFormat("Unsupported file type. Please upload a .txt, .pdf, or .docx file")


# =============================================================================
# EXTRACTOR
# =============================================================================

class DocumentExtractor:
    """
    Format-dispatching text extractor.

    Decoder failures are wrapped in ExtractionFailed with a readable cause;
    empty results raise EmptyDocument.
    """

    def extract(self, data: bytes, name: str, mime_type: Optional[str] = None) -> str:
        fmt = detect_format(name, mime_type)

        if fmt == DocumentFormat.TEXT:
            raw = self._decode_text(data)
        elif fmt == DocumentFormat.PDF:
            raw = self._decode_with(
                self._decode_pdf, data,
                "Failed to extract text from PDF. The file might be corrupted or password-protected.",
            )
        else:
            raw = self._decode_with(
                self._decode_docx, data,
                "Failed to extract text from Word document. The file might be corrupted or password-protected.",
            )

        text = normalize_text(raw)
        if not text:
            raise EmptyDocument("Could not extract text from document. It appears to be empty or unreadable.")
        return text

    async def extract_async(self, data: bytes, name: str, mime_type: Optional[str] = None) -> str:
        """Run extract() off the event loop with a bounded timeout."""
        with agent_span("extract_document", "DocumentExtractor", {"document.name": name}) as span:
            span.set_attribute("document.size", len(data))
            loop = asyncio.get_running_loop()
            try:
                text = await asyncio.wait_for(
                    loop.run_in_executor(None, self.extract, data, name, mime_type),
                    timeout=settings.DOCUMENT_EXTRACTION_TIMEOUT_SECONDS,
                )
            except asyncio.TimeoutError as e:
                raise ExtractionFailed("Document processing timed out. Please try a smaller file.") from e
            except ExtractionError as e:
                span.set_attribute("document.error", e.kind)
                logger.info(f"Extraction of {name!r} failed ({e.kind}): {e.message}")
                raise
            span.set_attribute("document.text_length", len(text))
            return text

    @staticmethod
    def _decode_with(decoder, data: bytes, failure_message: str) -> str:
        try:
            return decoder(data)
        except ExtractionFailed:
            raise
        except Exception as e:
            logger.warning(f"Document decoder error: {type(e).__name__}: {e}")
            raise ExtractionFailed(failure_message) from e

    @staticmethod
    def _decode_text(data: bytes) -> str:
        return data.decode("utf-8-sig", errors="replace")

    @staticmethod
    def _decode_pdf(data: bytes) -> str:
        reader = PdfReader(io.BytesIO(data))
        # Owner-password-only PDFs open with an empty user password
        if reader.is_encrypted and not reader.decrypt(""):
            raise ExtractionFailed("Failed to extract text from PDF. The file is password-protected.")
        text_parts = []
        for page in reader.pages:
            text = page.extract_text()
            if text:
                text_parts.append(text)
        return "\n\n".join(text_parts)

    @staticmethod
    def _decode_docx(data: bytes) -> str:
        doc = DocxDocument(io.BytesIO(data))
        text_parts = [para.text for para in doc.paragraphs if para.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    text_parts.append(" ".join(cells))
        return "\n\n".join(text_parts)


# Singleton instance
document_extractor = DocumentExtractor()
