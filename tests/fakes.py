"""
Test doubles for external services.

Deterministic embeddings and scripted chat models standing in for the
embedding service and the inference engine.

Dependencies: langchain_core
System role: Test fakes shared across suites
"""

import asyncio
import hashlib
import re
from collections.abc import AsyncIterator, Iterator
from typing import Any

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, AIMessageChunk, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatGenerationChunk, ChatResult

WORD_PATTERN = re.compile(r"[a-z0-9]+")


class BagOfWordsEmbeddings(Embeddings):
    """
    Deterministic embeddings: hashed word counts plus a constant bias slot.

    Texts sharing words are close in cosine space; the bias keeps every
    vector non-zero.
    """

    def __init__(self, dimension: int = 64) -> None:
        self.dimension = dimension
        self.document_calls = 0
        self.query_calls = 0

    def _vector(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        for word in WORD_PATTERN.findall(text.lower()):
            slot = int(hashlib.md5(word.encode()).hexdigest(), 16) % (self.dimension - 1)
            vector[slot] += 1.0
        vector[-1] = 0.01
        return vector

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls += 1
        return [self._vector(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls += 1
        return self._vector(text)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        return self.embed_documents(texts)

    async def aembed_query(self, text: str) -> list[float]:
        return self.embed_query(text)


class FailingEmbeddings(BagOfWordsEmbeddings):
    """Embeddings whose document calls always fail."""

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        raise RuntimeError("embedding service down")


class SlowEmbeddings(BagOfWordsEmbeddings):
    """Embeddings that never answer within a short deadline."""

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        await asyncio.sleep(5)
        return self.embed_documents(texts)


class FlakyChatModel(BaseChatModel):
    """
    Chat model that fails its first ``failures`` calls, then answers.

    Streams one character per chunk. ``fail_after`` makes every stream
    fail after that many characters.
    """

    response: str = "ok"
    failures: int = 0
    fail_after: int | None = None
    calls: int = 0
    prompts: list[str] = []

    @property
    def _llm_type(self) -> str:
        return "flaky-fake"

    def _record(self, messages: list[BaseMessage]) -> None:
        self.calls += 1
        self.prompts.append(str(messages[-1].content))
        if self.calls <= self.failures:
            raise ConnectionError(f"model call {self.calls} failed")

    def _generate(self, messages: list[BaseMessage], stop: Any = None, run_manager: Any = None, **kwargs: Any) -> ChatResult:
        self._record(messages)
        return ChatResult(generations=[ChatGeneration(message=AIMessage(content=self.response))])

    def _stream(self, messages: list[BaseMessage], stop: Any = None, run_manager: Any = None, **kwargs: Any) -> Iterator[ChatGenerationChunk]:
        self._record(messages)
        for position, char in enumerate(self.response):
            if self.fail_after is not None and position == self.fail_after:
                raise ConnectionError("stream dropped")
            yield ChatGenerationChunk(message=AIMessageChunk(content=char))

    async def _astream(self, messages: list[BaseMessage], stop: Any = None, run_manager: Any = None, **kwargs: Any) -> AsyncIterator[ChatGenerationChunk]:
        for chunk in self._stream(messages, stop=stop, **kwargs):
            await asyncio.sleep(0)
            yield chunk


async def collect(stream: AsyncIterator[str]) -> list[str]:
    """Drain an async iterator of fragments."""
    return [fragment async for fragment in stream]
