"""
In-memory FAISS vector index.

Stores chunk vectors for one corpus and answers nearest-neighbor queries.
The FAISS handle is created lazily on the first insert; until then the index
is UNINITIALIZED and grounded queries fail with NotReady.

Vectors are L2-normalized and searched by inner product, so scores are
cosine similarities. Ties are broken by insertion order (earlier wins).

Dependencies: langchain_community.vectorstores, faiss-cpu, langchain_core
System role: EmbeddingIndex (process memory only, nothing persisted)
"""

import asyncio
import logging

from langchain_community.vectorstores import FAISS
from langchain_community.vectorstores.utils import DistanceStrategy
from langchain_core.embeddings import Embeddings

from nova.boundary.vdb.vector_schemas import (
    IndexState,
    RetrievalResult,
    VectorSearchResult,
)
from nova.core.exceptions import EmbeddingServiceError, NotReady
from nova.models.chunk import Chunk

logger = logging.getLogger(__name__)

# Extra candidates fetched so equal-score neighbours can be re-ordered by position
TIE_MARGIN = 16


class FAISSIndex:
    """
    Lazily created FAISS index over chunk embeddings.

    Inserts are serialized by an asyncio lock; embedding happens before the
    lock is taken so a failed embedding call never leaves a partial document
    in the index. Queries do not lock and may or may not observe a document
    whose insert is still embedding.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        timeout_seconds: float = 30.0,
        name: str = "default",
    ) -> None:
        """
        Initialize an empty index.

        Args:
            embeddings: Embedding service client
            timeout_seconds: Deadline for each embedding call
            name: Label used in logs
        """
        self._embeddings = embeddings
        self._timeout = timeout_seconds
        self._name = name
        self._store: FAISS | None = None
        self._dimension: int | None = None
        self._size = 0
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> IndexState:
        return IndexState.READY if self._store is not None else IndexState.UNINITIALIZED

    @property
    def is_ready(self) -> bool:
        return self.state is IndexState.READY

    @property
    def size(self) -> int:
        return self._size

    @property
    def dimension(self) -> int | None:
        return self._dimension

    async def insert(self, chunks: list[Chunk]) -> int:
        """
        Embed chunks and append them to the index.

        Args:
            chunks: Chunks of one document, in document order

        Returns:
            int: Number of chunks inserted

        Raises:
            EmbeddingServiceError: Embedding call failed, timed out, or returned
                vectors of the wrong count or dimension
        """
        if not chunks:
            return 0

        texts = [chunk.content for chunk in chunks]
        vectors = await self._embed_documents(texts)

        async with self._lock:
            self._validate_vectors(vectors, expected_count=len(chunks))

            start = self._size
            ids = [str(start + offset) for offset in range(len(chunks))]
            metadatas = [
                {
                    **chunk.metadata,
                    "chunk_id": chunk.id,
                    "position": start + offset,
                }
                for offset, chunk in enumerate(chunks)
            ]
            text_embeddings = list(zip(texts, vectors))

            if self._store is None:
                self._store = FAISS.from_embeddings(
                    text_embeddings,
                    self._embeddings,
                    metadatas=metadatas,
                    ids=ids,
                    normalize_L2=True,
                    distance_strategy=DistanceStrategy.MAX_INNER_PRODUCT,
                )
                self._dimension = len(vectors[0])
                logger.info(
                    "Vector index created",
                    extra={"index": self._name, "dimension": self._dimension},
                )
            else:
                self._store.add_embeddings(text_embeddings, metadatas=metadatas, ids=ids)

            self._size += len(chunks)

        logger.info(
            "Chunks inserted into vector index",
            extra={"index": self._name, "inserted": len(chunks), "size": self._size},
        )
        return len(chunks)

    async def query(self, text: str, k: int = 4) -> RetrievalResult:
        """
        Return the k chunks most similar to the text.

        Args:
            text: Query text
            k: Number of chunks to return

        Returns:
            RetrievalResult: Hits ordered by similarity, then insertion order

        Raises:
            NotReady: Index has never received a document
            EmbeddingServiceError: Query embedding failed
        """
        if self._store is None:
            raise NotReady(self._name)
        if k < 1:
            raise ValueError("k must be at least 1")

        vector = await self._embed_query(text)
        if self._dimension is not None and len(vector) != self._dimension:
            raise EmbeddingServiceError(
                "Query embedding has wrong dimension",
                details={"expected": self._dimension, "actual": len(vector)},
            )

        fetch_k = min(self._size, k + TIE_MARGIN)
        hits = self._store.similarity_search_with_score_by_vector(vector, k=fetch_k)

        results = [
            VectorSearchResult(
                chunk_id=doc.metadata.get("chunk_id", ""),
                content=doc.page_content,
                source=doc.metadata.get("source", ""),
                position=doc.metadata["position"],
                similarity_score=float(score),
            )
            for doc, score in hits
        ]
        results.sort(key=lambda result: (-round(result.similarity_score, 6), result.position))

        return RetrievalResult(query=text, results=results[:k])

    async def _embed_documents(self, texts: list[str]) -> list[list[float]]:
        try:
            return await asyncio.wait_for(
                self._embeddings.aembed_documents(texts),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise EmbeddingServiceError(
                "Embedding service timed out",
                details={"timeout_seconds": self._timeout, "texts": len(texts)},
            ) from e
        except Exception as e:
            raise EmbeddingServiceError(f"Failed to generate embeddings: {e}") from e

    async def _embed_query(self, text: str) -> list[float]:
        try:
            return await asyncio.wait_for(
                self._embeddings.aembed_query(text),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise EmbeddingServiceError(
                "Embedding service timed out",
                details={"timeout_seconds": self._timeout},
            ) from e
        except Exception as e:
            raise EmbeddingServiceError(f"Failed to embed query: {e}") from e

    def _validate_vectors(self, vectors: list[list[float]], expected_count: int) -> None:
        if len(vectors) != expected_count:
            raise EmbeddingServiceError(
                "Embedding service returned wrong number of vectors",
                details={"expected": expected_count, "actual": len(vectors)},
            )
        dimension = self._dimension or len(vectors[0])
        if dimension == 0 or any(len(vector) != dimension for vector in vectors):
            raise EmbeddingServiceError(
                "Embedding vectors do not match index dimension",
                details={"expected": dimension},
            )
