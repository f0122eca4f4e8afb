"""
Test suite for ChatService.

Tests plain and grounded turns, history recording on completion and failure,
client-supplied history and concurrent turns on a shared session.

System role: Verification of chat service orchestration layer
"""

import asyncio

import pytest

from nova.application.services.chat_service import ChatService
from nova.configs.ingestion import TEXT
from nova.core.document_processing.entrypoint import DocumentPipeline
from nova.core.exceptions import ModelUnavailable, NotReady
from nova.core.rag_query.model_client import ModelClient
from nova.core.rag_query.retrieval_chain import RetrievalChain
from nova.core.session.session_manager import Session, SessionManager
from nova.core.streaming.relay import StreamRelay
from nova.models.chat import Speaker, TurnStatus
from nova.models.document import Document

from tests.fakes import FlakyChatModel, collect


def make_service(model: FlakyChatModel) -> ChatService:
    client = ModelClient(model, max_attempts=1, backoff_seconds=0)
    return ChatService(model=client, chain=RetrievalChain(client), relay=StreamRelay(4))


async def ground(manager: SessionManager, session: Session, text: str) -> None:
    document = Document(content=text.encode(), media_type=TEXT, filename="doc.txt")
    await DocumentPipeline().ingest(document, session.index)
    manager.mark_grounded(session)


@pytest.fixture
def model() -> FlakyChatModel:
    """Provide scripted chat model."""
    return FlakyChatModel(response="Hello there!")


@pytest.fixture
def chat_service(model: FlakyChatModel) -> ChatService:
    """Provide ChatService over the scripted model."""
    return make_service(model)


@pytest.fixture
def session(session_manager: SessionManager) -> Session:
    """Provide the default session."""
    return session_manager.get_or_create("default")


class TestChatServiceAsk:
    """Test suite for ChatService.ask method."""

    @pytest.mark.asyncio
    async def test_ask_should_stream_answer_and_record_turn(
        self, chat_service: ChatService, session: Session
    ) -> None:
        """Test a completed answer is appended to history."""
        # Act
        answer = "".join(await collect(await chat_service.ask(session, "Hi")))

        # Assert
        assert answer == "Hello there!"
        assert session.history.render() == "User: Hi\nNova: Hello there!"

    @pytest.mark.asyncio
    async def test_ask_should_include_prior_turns_in_prompt(
        self, chat_service: ChatService, model: FlakyChatModel, session: Session
    ) -> None:
        """Test the second prompt carries the first exchange."""
        # Arrange
        await collect(await chat_service.ask(session, "First question"))

        # Act
        await collect(await chat_service.ask(session, "Second question"))

        # Assert
        assert "User: First question\nNova: Hello there!" in model.prompts[-1]
        assert "User: Second question" in model.prompts[-1]

    @pytest.mark.asyncio
    async def test_ask_should_fail_turn_when_model_fails_before_first_token(
        self, session: Session
    ) -> None:
        """Test a pre-stream failure raises and leaves no renderable turn."""
        # Arrange
        service = make_service(FlakyChatModel(response="x", failures=5))

        # Act / Assert
        with pytest.raises(ModelUnavailable):
            await service.ask(session, "Hi")
        assert session.history.render() == ""
        assert all(turn.status is TurnStatus.ERROR for turn in session.history.turns)

    @pytest.mark.asyncio
    async def test_ask_should_fail_turn_on_mid_stream_failure(self, session: Session) -> None:
        """Test a partial answer ends cleanly and is not rendered."""
        # Arrange
        service = make_service(FlakyChatModel(response="Hello there!", fail_after=5))

        # Act
        answer = "".join(await collect(await service.ask(session, "Hi")))

        # Assert
        assert answer == "Hello"
        assert session.history.render() == ""
        assert session.history.turns[-1].text == "Hello"

    @pytest.mark.asyncio
    async def test_concurrent_asks_should_record_each_turn_once(
        self, chat_service: ChatService, session: Session
    ) -> None:
        """Test concurrent turns on one session are all kept, none lost."""
        # Act
        streams = await asyncio.gather(
            chat_service.ask(session, "Question A"),
            chat_service.ask(session, "Question B"),
        )
        await asyncio.gather(*(collect(stream) for stream in streams))

        # Assert
        questions = [turn.text for turn in session.history.turns if turn.speaker is Speaker.USER]
        assert sorted(questions) == ["Question A", "Question B"]
        assert len(session.history.turns) == 4
        assert all(turn.status is TurnStatus.COMPLETE for turn in session.history.turns)


class TestChatServiceRag:
    """Test suite for ChatService.rag method."""

    @pytest.mark.asyncio
    async def test_rag_should_raise_not_ready_without_documents(
        self, chat_service: ChatService, session: Session
    ) -> None:
        """Test grounded questions fail before any document is ingested."""
        with pytest.raises(NotReady):
            await chat_service.rag(session, "What is the capital of France?")
        assert session.history.turns == []

    @pytest.mark.asyncio
    async def test_rag_should_ground_answer_in_ingested_document(
        self, session_manager: SessionManager, session: Session, paris_model
    ) -> None:
        """Test the capital scenario through the service."""
        # Arrange
        client = ModelClient(paris_model, backoff_seconds=0)
        service = ChatService(model=client, chain=RetrievalChain(client))
        await ground(session_manager, session, "The capital of France is Paris.")

        # Act
        answer = "".join(await collect(await service.rag(session, "What is the capital of France?")))

        # Assert
        assert "Paris" in answer
        assert session.history.render().endswith("Nova: The capital of France is Paris.")

    @pytest.mark.asyncio
    async def test_rag_should_use_client_history_verbatim(
        self,
        chat_service: ChatService,
        model: FlakyChatModel,
        session_manager: SessionManager,
        session: Session,
    ) -> None:
        """Test supplied history replaces the session history in the prompt."""
        # Arrange
        await ground(session_manager, session, "Some grounding text.")
        await collect(await chat_service.ask(session, "Session-only question"))

        # Act
        await collect(await chat_service.rag(session, "Next?", history="User: from client"))

        # Assert
        assert "User: from client" in model.prompts[-1]
        assert "Session-only question" not in model.prompts[-1]
