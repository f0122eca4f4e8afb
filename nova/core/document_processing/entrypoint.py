"""
Document pipeline orchestrator.

Coordinates extraction, chunking and index insertion for one uploaded file.
Each stage only runs if the previous one succeeded.

Dependencies: All task modules, nova.boundary.vdb, nova.configs
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
import uuid

from fastapi.concurrency import run_in_threadpool

from nova.boundary.vdb.faiss_store import FAISSIndex
from nova.configs.ingestion import IngestionSettings
from nova.core.exceptions import UnsupportedMediaType, ValidationError
from nova.models.document import Document

from .models import PipelineResult
from .tasks import ChunkingTask, ParsingTask
from .tasks.parsing_task import normalize_media_type

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Orchestrate document ingestion: parse -> chunk -> embed+insert."""

    def __init__(self, settings: IngestionSettings | None = None) -> None:
        """
        Initialize pipeline with configuration.

        Args:
            settings: Ingestion settings (uses defaults if None)
        """
        self._settings = settings or IngestionSettings()
        self._parsing_task = ParsingTask()
        self._chunking_task = ChunkingTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
        )

    def accepts(self, media_type: str | None) -> bool:
        """Whether the media type is both configured and extractable."""
        return (
            self._parsing_task.supports(media_type)
            and normalize_media_type(media_type) in self._settings.allowed_media_types
        )

    async def ingest(
        self,
        document: Document,
        index: FAISSIndex,
        document_id: str | None = None,
    ) -> PipelineResult:
        """
        Process a document through the full pipeline.

        Args:
            document: Uploaded document
            index: Target vector index (created lazily on first insert)
            document_id: Optional document ID (generated if None)

        Returns:
            PipelineResult: Chunk count and timing

        Raises:
            UnsupportedMediaType: Media type not accepted; nothing was processed
            ParsingError: Extraction failed
            ValidationError: Document contains no extractable text
            EmbeddingServiceError: Embedding failed; index left unchanged
        """
        if not self.accepts(document.media_type):
            raise UnsupportedMediaType(document.media_type, self._settings.allowed_media_types)

        start_time = time.perf_counter()
        doc_id = document_id or str(uuid.uuid4())

        logger.info(
            f"{__name__}:ingest - START",
            extra={"document_id": doc_id, "file_name": document.filename, "size": document.size},
        )

        # Extraction is CPU/file bound; keep it off the event loop
        extracted = await run_in_threadpool(self._parsing_task.parse, document)
        if extracted.is_empty:
            raise ValidationError(
                f"{document.filename} contains no extractable text",
                field="file",
                details={"document_id": doc_id, "file_type": extracted.media_type},
            )

        chunks = self._chunking_task.split(extracted.text, source=document.filename)
        inserted = await index.insert(chunks)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:ingest - OK",
            extra={
                "document_id": doc_id,
                "chunk_count": inserted,
                "processing_time_ms": round(elapsed_ms, 2),
            },
        )

        return PipelineResult(
            document_id=doc_id,
            filename=document.filename,
            chunk_count=inserted,
            processing_time_ms=elapsed_ms,
        )

