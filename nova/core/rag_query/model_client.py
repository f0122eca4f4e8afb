"""
Language model client.

Wraps a LangChain chat model piped to StrOutputParser and adds a deadline on
every call plus a bounded retry policy. Single-shot calls retry on any
failure; streamed calls retry only until the first token has been emitted,
since a partial answer cannot be taken back.

Dependencies: langchain_core, langchain_google_genai, tenacity, python-dotenv
System role: ModelClient (inference engine consumed as an opaque service)
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from dotenv import load_dotenv
from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from nova.configs.model import ModelSettings
from nova.core.exceptions import ModelUnavailable
from nova.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)
load_dotenv()


def _describe(exc: BaseException | None) -> str:
    if exc is None:
        return "unknown error"
    return str(exc) or type(exc).__name__


def build_chat_model(settings: ModelSettings) -> BaseChatModel:
    """
    Create the chat model from settings.

    Args:
        settings: Model settings

    Returns:
        BaseChatModel: Gemini chat model
    """
    return ChatGoogleGenerativeAI(
        model=settings.model_id,
        temperature=settings.temperature,
        timeout=settings.timeout_seconds,
    )


class ModelClient:
    """Deadline-bounded, retrying access to a chat model."""

    def __init__(
        self,
        chat_model: BaseChatModel,
        max_attempts: int = 3,
        timeout_seconds: float = 60.0,
        backoff_seconds: float = 0.5,
    ) -> None:
        """
        Initialize model client.

        Args:
            chat_model: LangChain chat model
            max_attempts: Attempts before raising ModelUnavailable
            timeout_seconds: Deadline for a single-shot call or each streamed read
            backoff_seconds: Base delay between attempts (exponential)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._chain = chat_model | StrOutputParser()
        self._max_attempts = max_attempts
        self._timeout = timeout_seconds
        self._backoff = backoff_seconds

    @classmethod
    def from_settings(cls, settings: ModelSettings, chat_model: BaseChatModel | None = None) -> "ModelClient":
        return cls(
            chat_model or build_chat_model(settings),
            max_attempts=settings.max_attempts,
            timeout_seconds=settings.timeout_seconds,
        )

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(initial=self._backoff, max=8, jitter=self._backoff),
            retry=retry_if_exception_type(Exception),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:complete - Retry {retry_state.attempt_number}/{self._max_attempts} after model failure"
            ),
            reraise=False,
        )

    async def complete(self, prompt: str) -> str:
        """
        Produce a full answer in one call.

        Args:
            prompt: Assembled prompt text

        Returns:
            str: Model answer

        Raises:
            ModelUnavailable: Every attempt failed or timed out
        """
        try:
            async for attempt in self._retrying():
                with attempt:
                    return await asyncio.wait_for(
                        self._chain.ainvoke(prompt), timeout=self._timeout
                    )
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(
                f"{__name__}:complete - Model call failed after {self._max_attempts} attempts",
                extra={"error": safe_log_value(str(cause))},
            )
            raise ModelUnavailable(
                f"Language model unavailable: {_describe(cause)}",
                attempts=self._max_attempts,
            ) from cause
        raise ModelUnavailable("Language model returned no answer", attempts=self._max_attempts)

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        """
        Stream answer fragments as the model produces them.

        Empty fragments are skipped. Closing the iterator early closes the
        underlying model stream.

        Args:
            prompt: Assembled prompt text

        Yields:
            str: Non-empty answer fragments in order

        Raises:
            ModelUnavailable: Failure before the first fragment after all
                attempts, or any failure once fragments were emitted
        """
        emitted = 0
        attempt = 0
        while True:
            attempt += 1
            source = self._chain.astream(prompt)
            try:
                while True:
                    try:
                        fragment = await asyncio.wait_for(
                            source.__anext__(), timeout=self._timeout
                        )
                    except StopAsyncIteration:
                        return
                    if not fragment:
                        continue
                    emitted += 1
                    yield fragment
            except Exception as e:
                if emitted:
                    logger.error(
                        f"{__name__}:stream - Model stream failed mid-answer",
                        extra={"tokens_emitted": emitted, "error": safe_log_value(str(e))},
                    )
                    raise ModelUnavailable(
                        f"Language model stream interrupted: {_describe(e)}",
                        attempts=attempt,
                        details={"tokens_emitted": emitted},
                    ) from e
                if attempt >= self._max_attempts:
                    logger.error(
                        f"{__name__}:stream - Model stream failed after {attempt} attempts",
                        extra={"error": safe_log_value(str(e))},
                    )
                    raise ModelUnavailable(
                        f"Language model unavailable: {_describe(e)}",
                        attempts=attempt,
                        details={"tokens_emitted": 0},
                    ) from e
                logger.warning(
                    f"{__name__}:stream - Attempt {attempt} failed before first token, retrying",
                    extra={"error": safe_log_value(str(e))},
                )
                await asyncio.sleep(min(self._backoff * 2 ** (attempt - 1), 8))
            finally:
                await source.aclose()
