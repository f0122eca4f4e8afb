"""
Vector store configuration settings.

Manages the in-memory FAISS index and the embedding service behind it.

Dependencies: pydantic, pydantic_settings
System role: Vector index configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class VectorStoreSettings(BaseSettings):
    """In-memory FAISS index configuration."""

    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=1024,
        description="Embedding vector dimension requested from the embedding service",
    )
    top_k: int = Field(default=4, ge=1, description="Number of chunks retrieved per question")
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Deadline for a single embedding call",
    )

    class Config:
        """Pydantic config."""

        env_prefix = "VECTOR_STORE_"
        case_sensitive = False
