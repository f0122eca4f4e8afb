"""
Token stream relay.

Moves answer fragments from a token source to the HTTP response body through
a bounded asyncio.Queue. A producer task drains the source; the consumer is
the response body iterator. Completion and failure travel as distinct
sentinels, so a failure after the first token ends the stream cleanly instead
of being mistaken for a normal end.

Errors raised before the first token surface from StreamRelay.open(), while
the route can still answer with a JSON error and a status code.

Dependencies: asyncio (stdlib), nova.models.streaming
System role: StreamRelay between model stream and transport
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable

from nova.models.streaming import RelayOutcome, RelaySummary
from nova.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)

FinishCallback = Callable[[RelayOutcome, str], None]

_DONE = object()


class _Failure:
    """Queue item carrying the error that ended the source."""

    __slots__ = ("error",)

    def __init__(self, error: Exception) -> None:
        self.error = error


class RelayStream:
    """
    Consumer side of a relay.

    Iterate it exactly once. Stopping iteration early (client disconnect,
    explicit aclose) cancels the producer, which closes the token source.
    """

    def __init__(
        self,
        queue: asyncio.Queue,
        producer: asyncio.Task,
        first: object,
        on_finish: FinishCallback | None = None,
    ) -> None:
        self._queue = queue
        self._producer = producer
        self._first = first
        self._on_finish = on_finish
        self._parts: list[str] = []
        self._summary: RelaySummary | None = None

    @property
    def text(self) -> str:
        """Concatenation of every fragment delivered so far."""
        return "".join(self._parts)

    @property
    def summary(self) -> RelaySummary | None:
        """Final state, None while the stream is still open."""
        return self._summary

    async def __aiter__(self) -> AsyncIterator[str]:
        outcome: RelayOutcome | None = None
        error: Exception | None = None
        item, self._first = self._first, None
        try:
            while True:
                if item is None:
                    item = await self._queue.get()
                if item is _DONE:
                    outcome = RelayOutcome.COMPLETED
                    return
                if isinstance(item, _Failure):
                    outcome, error = RelayOutcome.FAILED, item.error
                    logger.error(
                        f"{__name__}:__aiter__ - Token source failed after streaming began",
                        exc_info=item.error,
                        extra={"tokens_emitted": len(self._parts)},
                    )
                    return
                self._parts.append(item)
                item = None
                yield self._parts[-1]
        finally:
            if outcome is None:
                outcome = RelayOutcome.CANCELLED
                self._producer.cancel()
                logger.info(
                    f"{__name__}:__aiter__ - Consumer stopped early, cancelling producer",
                    extra={"tokens_emitted": len(self._parts)},
                )
            self._finish(outcome, error)

    async def aclose(self) -> None:
        """Abandon the stream without iterating it."""
        if self._summary is not None:
            return
        self._producer.cancel()
        try:
            await self._producer
        except asyncio.CancelledError:
            pass
        self._finish(RelayOutcome.CANCELLED, None)

    def _finish(self, outcome: RelayOutcome, error: Exception | None) -> None:
        if self._summary is not None:
            return
        self._summary = RelaySummary(
            outcome=outcome,
            text=self.text,
            token_count=len(self._parts),
            error=str(error) if error else None,
        )
        if self._on_finish is not None:
            self._on_finish(outcome, self._summary.text)


class StreamRelay:
    """Open relays with a fixed buffer size."""

    def __init__(self, buffer_size: int = 64) -> None:
        """
        Initialize relay factory.

        Args:
            buffer_size: Fragments buffered before the producer waits on the consumer
        """
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        self._buffer_size = buffer_size

    async def open(
        self,
        source: AsyncIterator[str],
        on_finish: FinishCallback | None = None,
    ) -> RelayStream:
        """
        Start relaying a token source.

        Waits for the first item, so a source that fails before emitting
        anything raises here and never produces a response body.

        Args:
            source: Async iterator of answer fragments
            on_finish: Called once with the outcome and full emitted text

        Returns:
            RelayStream: Iterable consumer side

        Raises:
            Exception: Whatever the source raised before its first fragment
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._buffer_size)
        producer = asyncio.create_task(self._produce(source, queue))

        try:
            first = await queue.get()
        except asyncio.CancelledError:
            producer.cancel()
            if on_finish is not None:
                on_finish(RelayOutcome.CANCELLED, "")
            raise

        if isinstance(first, _Failure):
            await producer
            logger.warning(
                f"{__name__}:open - Token source failed before first fragment",
                extra={"error": safe_log_value(str(first.error))},
            )
            if on_finish is not None:
                on_finish(RelayOutcome.FAILED, "")
            raise first.error

        return RelayStream(queue, producer, first, on_finish)

    @staticmethod
    async def _produce(source: AsyncIterator[str], queue: asyncio.Queue) -> None:
        try:
            async for fragment in source:
                await queue.put(fragment)
        except Exception as e:
            await queue.put(_Failure(e))
        else:
            await queue.put(_DONE)
        finally:
            aclose = getattr(source, "aclose", None)
            if aclose is not None:
                await aclose()
