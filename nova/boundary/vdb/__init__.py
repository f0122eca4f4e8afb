"""
Vector index boundary.

Exports: FAISSIndex, IndexState, RetrievalResult, VectorSearchResult, build_embeddings
"""

from nova.boundary.vdb.embeddings_wrapper import build_embeddings
from nova.boundary.vdb.faiss_store import FAISSIndex
from nova.boundary.vdb.vector_schemas import (
    IndexState,
    RetrievalResult,
    VectorSearchResult,
)

__all__ = [
    "FAISSIndex",
    "IndexState",
    "RetrievalResult",
    "VectorSearchResult",
    "build_embeddings",
]
