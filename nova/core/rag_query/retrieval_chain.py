"""
Retrieval-augmented answer chain.

Retrieves the chunks most similar to a question, assembles the grounded
prompt, and streams the model's answer. Retrieval always completes before
the first model read.

Dependencies: nova.boundary.vdb, nova.core.rag_query
System role: RetrievalChain orchestration
"""

import logging
import time
from collections.abc import AsyncIterator

from nova.boundary.vdb.faiss_store import FAISSIndex
from nova.boundary.vdb.vector_schemas import RetrievalResult
from nova.core.exceptions import NotReady
from nova.core.rag_query.model_client import ModelClient
from nova.core.rag_query.prompt import PromptAssembler
from nova.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)


class RetrievalChain:
    """Question → top-k chunks → grounded prompt → streamed answer."""

    def __init__(
        self,
        model: ModelClient,
        assembler: PromptAssembler | None = None,
        top_k: int = 4,
    ) -> None:
        """
        Initialize retrieval chain.

        Args:
            model: Model client used for streaming
            assembler: Prompt assembler (default templates when None)
            top_k: Number of chunks retrieved per question
        """
        if top_k < 1:
            raise ValueError("top_k must be at least 1")
        self._model = model
        self._assembler = assembler or PromptAssembler()
        self._top_k = top_k

    @property
    def top_k(self) -> int:
        return self._top_k

    async def retrieve(self, question: str, index: FAISSIndex) -> RetrievalResult:
        """
        Fetch the chunks most similar to the question.

        Raises:
            NotReady: The index has not received any document
        """
        if not index.is_ready:
            raise NotReady(index.name)

        start = time.perf_counter()
        result = await index.query(question, k=self._top_k)
        logger.info(
            f"{__name__}:retrieve - Retrieved {len(result)} chunks",
            extra={
                "index": index.name,
                "question": safe_log_value(question, max_length=100),
                "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return result

    async def prepare(self, question: str, history: str, index: FAISSIndex) -> str:
        """
        Run retrieval and prompt assembly.

        Args:
            question: User question
            history: Rendered conversation history
            index: Corpus to retrieve from

        Returns:
            str: Grounded prompt ready for the model
        """
        result = await self.retrieve(question, index)
        return self._assembler.grounded(question, history, result.as_context())

    async def answer(self, question: str, history: str, index: FAISSIndex) -> AsyncIterator[str]:
        """
        Stream a grounded answer.

        Yields:
            str: Answer fragments in order
        """
        prompt = await self.prepare(question, history, index)
        async for fragment in self._model.stream(prompt):
            yield fragment
