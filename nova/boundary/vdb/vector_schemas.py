"""
Vector index schemas.

Pydantic models for index state and retrieval results.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from enum import Enum

from pydantic import BaseModel, Field

CONTEXT_SEPARATOR = "\n\n"


class IndexState(str, Enum):
    """Whether an index has received its first document."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


class VectorSearchResult(BaseModel):
    """Single result from vector search."""

    chunk_id: str = Field(description="Chunk identifier")
    content: str = Field(description="Chunk text content")
    source: str = Field(default="", description="Filename the chunk came from")
    position: int = Field(description="Insertion order within the index")
    similarity_score: float = Field(description="Cosine similarity (-1.0 to 1.0)")


class RetrievalResult(BaseModel):
    """Ordered chunks returned for one query, most similar first."""

    query: str
    results: list[VectorSearchResult] = Field(default_factory=list)

    @property
    def texts(self) -> list[str]:
        return [result.content for result in self.results]

    def as_context(self) -> str:
        """Join chunk texts with a blank line for prompt assembly."""
        return CONTEXT_SEPARATOR.join(self.texts)

    def __len__(self) -> int:
        return len(self.results)
