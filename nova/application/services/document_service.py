"""
Document service orchestrator.

Validates uploads against size and type limits before any processing, runs
the ingestion pipeline into the session's index, and enables grounding for
the session on success.

Dependencies: nova.core.document_processing, nova.core.session, nova.configs
System role: Document upload orchestration
"""

import logging
import mimetypes

from nova.configs.ingestion import IngestionSettings
from nova.core.document_processing.entrypoint import DocumentPipeline
from nova.core.document_processing.models import PipelineResult
from nova.core.document_processing.tasks.parsing_task import normalize_media_type
from nova.core.exceptions import FileTooLarge, UnsupportedMediaType, ValidationError
from nova.core.session.session_manager import Session, SessionManager
from nova.models.document import Document

logger = logging.getLogger(__name__)

GENERIC_MEDIA_TYPES = {"", "application/octet-stream"}


class DocumentService:
    """
    Document service orchestrator.

    Rejected uploads leave the index and grounding state untouched.
    """

    def __init__(
        self,
        sessions: SessionManager,
        pipeline: DocumentPipeline | None = None,
        settings: IngestionSettings | None = None,
    ) -> None:
        """
        Initialize document service.

        Args:
            sessions: Session registry, notified when a session gains a corpus
            pipeline: Optional DocumentPipeline (created if None)
            settings: Ingestion settings (uses defaults if None)
        """
        self.sessions = sessions
        self.settings = settings or IngestionSettings()
        self._pipeline = pipeline

    @property
    def pipeline(self) -> DocumentPipeline:
        """Lazy-load pipeline to avoid initialization cost."""
        if self._pipeline is None:
            self._pipeline = DocumentPipeline(self.settings)
        return self._pipeline

    def resolve_media_type(self, media_type: str | None, filename: str) -> str:
        """Declared media type, or one guessed from the filename when generic."""
        normalized = normalize_media_type(media_type)
        if normalized in GENERIC_MEDIA_TYPES:
            guessed, _ = mimetypes.guess_type(filename)
            return normalize_media_type(guessed) or normalized
        return normalized

    def validate(self, content: bytes, media_type: str | None, filename: str | None) -> Document:
        """
        Check an upload against the configured limits.

        Args:
            content: Raw file bytes
            media_type: Declared MIME type
            filename: Original filename

        Returns:
            Document: Validated document ready for ingestion

        Raises:
            ValidationError: No file was provided
            FileTooLarge: Upload exceeds max_file_size
            UnsupportedMediaType: Type is not PDF, DOCX, PPTX or plain text
        """
        if not filename:
            raise ValidationError("No file uploaded.", field="file")
        if len(content) > self.settings.max_file_size:
            raise FileTooLarge(self.settings.max_file_size, len(content))

        resolved = self.resolve_media_type(media_type, filename)
        if not self.pipeline.accepts(resolved):
            raise UnsupportedMediaType(media_type or resolved or "unknown", self.settings.allowed_media_types)

        return Document(content=content, media_type=resolved, filename=filename)

    async def upload(
        self,
        session: Session,
        content: bytes,
        media_type: str | None,
        filename: str | None,
    ) -> PipelineResult:
        """
        Validate and ingest one uploaded file.

        Flow:
        1. Validate size and type
        2. Parse, chunk and insert into the session index
        3. Enable grounding for the session

        Args:
            session: Requesting session
            content: Raw file bytes
            media_type: Declared MIME type
            filename: Original filename

        Returns:
            PipelineResult: Ingestion result
        """
        document = self.validate(content, media_type, filename)
        result = await self.pipeline.ingest(document, session.index)
        self.sessions.mark_grounded(session)

        logger.info(
            f"{__name__}:upload - Document ingested",
            extra={
                "session_id": session.session_id,
                "file_name": result.filename,
                "chunk_count": result.chunk_count,
            },
        )
        return result
