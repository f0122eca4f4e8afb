"""
Google Generative AI Embeddings wrapper with fixed output dimensionality.

Wraps GoogleGenerativeAIEmbeddings to ensure consistent vector dimensions
across all embedding calls, sync and async. The index rejects vectors whose
dimension differs from its first insert, so every call must request the same
size.

Dependencies: langchain_google_genai, python-dotenv
System role: Embedding service adapter
"""

import logging
from typing import Any, List

from dotenv import load_dotenv
from langchain_core.embeddings import Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from nova.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)
load_dotenv()


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """GoogleGenerativeAIEmbeddings that always request one output dimension."""

    _output_dimensionality: int = 1024

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 1024,
        **kwargs: Any,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Fixed dimension for all embeddings
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    def embed_documents(self, texts: List[str], **kwargs: Any) -> List[List[float]]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return super().embed_documents(texts, **kwargs)

    def embed_query(self, text: str, **kwargs: Any) -> List[float]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return super().embed_query(text, **kwargs)

    async def aembed_documents(self, texts: List[str], **kwargs: Any) -> List[List[float]]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return await super().aembed_documents(texts, **kwargs)

    async def aembed_query(self, text: str, **kwargs: Any) -> List[float]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return await super().aembed_query(text, **kwargs)


def build_embeddings(settings: VectorStoreSettings) -> Embeddings:
    """
    Create the embedding service client from settings.

    Args:
        settings: Vector store settings

    Returns:
        Embeddings: LangChain embeddings client
    """
    return FixedDimensionEmbeddings(
        model=settings.embedding_model,
        output_dimensionality=settings.embedding_dimension,
    )
