"""
Test suite for ModelClient.

Tests single-shot retries, deadlines, streaming retry before the first
token, mid-stream failure and the streaming concatenation law.

System role: Verification of model access policy
"""

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from nova.core.exceptions import ModelUnavailable
from nova.core.rag_query.model_client import ModelClient

from tests.fakes import FlakyChatModel, collect


class TestModelClientComplete:
    """Test suite for ModelClient.complete method."""

    @pytest.mark.asyncio
    async def test_complete_should_return_answer(self, model_client: ModelClient) -> None:
        """Test a healthy model answers in one call."""
        assert await model_client.complete("prompt") == "The capital of France is Paris."

    @pytest.mark.asyncio
    async def test_complete_should_retry_transient_failures(self) -> None:
        """Test failures below max_attempts are retried."""
        # Arrange
        model = FlakyChatModel(response="recovered", failures=2)
        client = ModelClient(model, max_attempts=3, backoff_seconds=0)

        # Act
        answer = await client.complete("prompt")

        # Assert
        assert answer == "recovered"
        assert model.calls == 3

    @pytest.mark.asyncio
    async def test_complete_should_raise_model_unavailable_after_max_attempts(self) -> None:
        """Test exhausting attempts raises ModelUnavailable."""
        # Arrange
        model = FlakyChatModel(response="never", failures=5)
        client = ModelClient(model, max_attempts=2, backoff_seconds=0)

        # Act / Assert
        with pytest.raises(ModelUnavailable) as exc_info:
            await client.complete("prompt")
        assert exc_info.value.details["attempts"] == 2
        assert model.calls == 2

    def test_init_should_reject_zero_attempts(self, paris_model: FakeListChatModel) -> None:
        """Test max_attempts below one is invalid."""
        with pytest.raises(ValueError):
            ModelClient(paris_model, max_attempts=0)


class TestModelClientStream:
    """Test suite for ModelClient.stream method."""

    @pytest.mark.asyncio
    async def test_stream_should_concatenate_to_single_shot_answer(self, model_client: ModelClient) -> None:
        """Test joined fragments equal the single-shot completion."""
        # Act
        fragments = await collect(model_client.stream("prompt"))
        completion = await model_client.complete("prompt")

        # Assert
        assert len(fragments) > 1
        assert "".join(fragments) == completion

    @pytest.mark.asyncio
    async def test_stream_should_retry_failure_before_first_token(self) -> None:
        """Test a stream that fails to start is retried."""
        # Arrange
        model = FlakyChatModel(response="hello", failures=1)
        client = ModelClient(model, max_attempts=3, backoff_seconds=0)

        # Act
        fragments = await collect(client.stream("prompt"))

        # Assert
        assert "".join(fragments) == "hello"
        assert model.calls == 2

    @pytest.mark.asyncio
    async def test_stream_should_not_retry_after_first_token(self) -> None:
        """Test a mid-stream failure raises with the emitted count."""
        # Arrange
        model = FlakyChatModel(response="hello world", fail_after=3)
        client = ModelClient(model, max_attempts=3, backoff_seconds=0)
        received = []

        # Act / Assert
        with pytest.raises(ModelUnavailable) as exc_info:
            async for fragment in client.stream("prompt"):
                received.append(fragment)
        assert "".join(received) == "hel"
        assert exc_info.value.details["tokens_emitted"] == 3
        assert model.calls == 1

    @pytest.mark.asyncio
    async def test_stream_should_raise_after_exhausting_attempts(self) -> None:
        """Test a stream that never starts raises ModelUnavailable."""
        model = FlakyChatModel(response="x", failures=10)
        client = ModelClient(model, max_attempts=2, backoff_seconds=0)
        with pytest.raises(ModelUnavailable):
            await collect(client.stream("prompt"))
        assert model.calls == 2

    @pytest.mark.asyncio
    async def test_stream_should_time_out_stalled_reads(self) -> None:
        """Test each read is bounded by the deadline."""
        # Arrange
        model = FakeListChatModel(responses=["slow answer"], sleep=1.0)
        client = ModelClient(model, max_attempts=1, timeout_seconds=0.05, backoff_seconds=0)

        # Act / Assert
        with pytest.raises(ModelUnavailable):
            await collect(client.stream("prompt"))

    @pytest.mark.asyncio
    async def test_stream_should_stop_reading_when_closed_early(self) -> None:
        """Test closing the iterator early stops the model stream."""
        # Arrange
        model = FlakyChatModel(response="abcdefghij")
        client = ModelClient(model, backoff_seconds=0)
        stream = client.stream("prompt")

        # Act
        first = await stream.__anext__()
        await stream.aclose()

        # Assert
        assert first == "a"
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()
