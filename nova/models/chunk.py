"""
Chunk domain model.

Represents a bounded, ordered slice of a document's extracted text.

Dependencies: pydantic
System role: Unit of retrieval shared by chunking, indexing and prompting
"""

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """Immutable document chunk."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Deterministic chunk identifier (hash)")
    index: int = Field(ge=0, description="Position of the chunk within its document")
    content: str = Field(min_length=1, description="Chunk text content")
    metadata: dict = Field(default_factory=dict, description="Chunk metadata (source, start_index)")
