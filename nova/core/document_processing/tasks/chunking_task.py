"""
Text chunking task using RecursiveCharacterTextSplitter.

Splits extracted document text into bounded, ordered passages.

Dependencies: langchain_text_splitters
System role: Second stage of document ingestion pipeline
"""

import hashlib
import logging

from langchain_text_splitters import RecursiveCharacterTextSplitter

from nova.models.chunk import Chunk

logger = logging.getLogger(__name__)

# No "" separator: a single word longer than chunk_size stays whole
# instead of being cut mid-word.
SEPARATORS = ["\n\n", "\n", " "]


class ChunkingTask:
    """Split text into chunks using RecursiveCharacterTextSplitter."""

    def __init__(
        self,
        chunk_size: int = 500,
        chunk_overlap: int = 0,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Overlap between consecutive chunks

        Raises:
            ValueError: When overlap is not smaller than size
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError("chunk_overlap must be in [0, chunk_size)")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=SEPARATORS,
            keep_separator=False,
            add_start_index=True,
            strip_whitespace=True,
            length_function=len,
        )

    def split(self, text: str, source: str | None = None) -> list[Chunk]:
        """
        Split text into chunks in document order.

        Args:
            text: Extracted document text (may be empty)
            source: Original filename recorded in chunk metadata

        Returns:
            list[Chunk]: Non-empty chunks, empty list for blank text
        """
        if not text or not text.strip():
            return []

        metadata = {"source": source} if source else {}
        documents = self._splitter.create_documents([text], metadatas=[metadata])

        chunks = []
        for document in documents:
            content = document.page_content
            if not content:
                continue
            chunks.append(
                Chunk(
                    id=self._generate_chunk_id(content, document.metadata),
                    index=len(chunks),
                    content=content,
                    metadata=dict(document.metadata),
                )
            )

        logger.debug(
            "Text chunked",
            extra={"source": source, "text_length": len(text), "chunk_count": len(chunks)},
        )
        return chunks

    def _generate_chunk_id(self, content: str, metadata: dict) -> str:
        """
        Generate deterministic chunk ID from content and metadata.

        Args:
            content: Chunk text content
            metadata: Chunk metadata

        Returns:
            str: SHA-256 hash of content + source + start_index
        """
        source = metadata.get("source", "")
        start_index = metadata.get("start_index", 0)
        hash_input = f"{content}:{source}:{start_index}"
        return hashlib.sha256(hash_input.encode()).hexdigest()[:16]
