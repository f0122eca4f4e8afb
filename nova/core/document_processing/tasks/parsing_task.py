"""
Document text extraction task.

Converts an uploaded Document into one ExtractedText, whatever its format:
PDF through LangChain PyPDFLoader, DOCX through python-docx, PPTX through
python-pptx, plain text by decoding. Callers never see loader-specific
output shapes.

Dependencies: langchain_community.document_loaders, pypdf, python-docx, python-pptx
System role: First stage of document ingestion pipeline
"""

import io
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path

from docx import Document as DocxDocument
from langchain_community.document_loaders import PyPDFLoader
from pptx import Presentation

from nova.configs.ingestion import DOCX, PDF, PPTX, TEXT
from nova.core.exceptions import ParsingError, UnsupportedMediaType
from nova.models.document import Document, ExtractedText

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


def normalize_media_type(media_type: str | None) -> str:
    """Strip parameters (``; charset=...``) and lowercase a MIME type."""
    if not media_type:
        return ""
    return media_type.split(";", 1)[0].strip().lower()


class ParsingTask:
    """Extract plain text from supported document formats."""

    def __init__(self) -> None:
        self._extractors: dict[str, Callable[[Document], tuple[str, int]]] = {
            PDF: self._extract_pdf,
            DOCX: self._extract_docx,
            PPTX: self._extract_pptx,
            TEXT: self._extract_text,
        }

    @property
    def supported_media_types(self) -> list[str]:
        return list(self._extractors)

    def supports(self, media_type: str | None) -> bool:
        return normalize_media_type(media_type) in self._extractors

    def parse(self, document: Document) -> ExtractedText:
        """
        Extract text from a document.

        Args:
            document: Uploaded document

        Returns:
            ExtractedText: Normalized text (may be empty)

        Raises:
            UnsupportedMediaType: Media type has no extractor
            ParsingError: Extraction failed
        """
        media_type = normalize_media_type(document.media_type)
        extractor = self._extractors.get(media_type)
        if extractor is None:
            raise UnsupportedMediaType(document.media_type, self.supported_media_types)

        try:
            text, page_count = extractor(document)
        except ParsingError:
            raise
        except Exception as e:
            raise ParsingError(
                f"Failed to extract text from {document.filename}: {e}",
                file_type=media_type,
            ) from e

        logger.info(
            "Document text extracted",
            extra={
                "file_name": document.filename,
                "media_type": media_type,
                "pages": page_count,
                "text_length": len(text),
            },
        )
        return ExtractedText(
            text=text,
            media_type=media_type,
            filename=document.filename,
            page_count=page_count,
        )

    def _extract_pdf(self, document: Document) -> tuple[str, int]:
        # PyPDFLoader reads from a path, so spool the bytes to a temp file
        suffix = Path(document.filename).suffix or ".pdf"
        fd, temp_path = tempfile.mkstemp(suffix=suffix, prefix="nova_upload_")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(document.content)
            pages = PyPDFLoader(temp_path).load()
        finally:
            try:
                os.unlink(temp_path)
            except OSError:
                logger.warning("Failed to remove temp file", extra={"path": temp_path})

        texts = [page.page_content.strip() for page in pages]
        return PAGE_SEPARATOR.join(text for text in texts if text), len(pages)

    def _extract_docx(self, document: Document) -> tuple[str, int]:
        docx = DocxDocument(io.BytesIO(document.content))
        paragraphs = [paragraph.text for paragraph in docx.paragraphs]
        for table in docx.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    paragraphs.append(" | ".join(cells))
        return "\n".join(p for p in paragraphs if p.strip()), 1

    def _extract_pptx(self, document: Document) -> tuple[str, int]:
        presentation = Presentation(io.BytesIO(document.content))
        slides = []
        for slide in presentation.slides:
            lines = []
            for shape in slide.shapes:
                if shape.has_text_frame:
                    for paragraph in shape.text_frame.paragraphs:
                        line = "".join(run.text for run in paragraph.runs).strip()
                        if line:
                            lines.append(line)
            if lines:
                slides.append("\n".join(lines))
        return PAGE_SEPARATOR.join(slides), len(presentation.slides)

    def _extract_text(self, document: Document) -> tuple[str, int]:
        content = document.content
        if content.startswith(b"\xef\xbb\xbf"):
            content = content[3:]
        try:
            return content.decode("utf-8"), 1
        except UnicodeDecodeError as e:
            raise ParsingError(
                f"Text file {document.filename} is not valid UTF-8",
                file_type=TEXT,
            ) from e
