"""
Chat service for plain and grounded questions.

Orchestrates one conversation turn: read the session history, build the
answer stream, relay it to the transport, and record the outcome in the
history once the stream ends.

Dependencies: nova.core.rag_query, nova.core.streaming, nova.core.session
System role: Chat service orchestration layer
"""

import logging

from nova.core.exceptions import NotReady
from nova.core.rag_query.model_client import ModelClient
from nova.core.rag_query.prompt import PromptAssembler
from nova.core.rag_query.retrieval_chain import RetrievalChain
from nova.core.session.session_manager import Session
from nova.core.streaming.relay import FinishCallback, RelayStream, StreamRelay
from nova.models.chat import ConversationTurn
from nova.models.streaming import RelayOutcome
from nova.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)


class ChatService:
    """
    Chat service for streamed conversation turns.

    Coordinates history rendering, prompt assembly or retrieval, the model
    stream and the relay. The turn is recorded as pending when the stream
    opens and settled when it finishes.
    """

    def __init__(
        self,
        model: ModelClient,
        chain: RetrievalChain,
        relay: StreamRelay | None = None,
        assembler: PromptAssembler | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            model: Model client for plain answers
            chain: Retrieval chain for grounded answers
            relay: Stream relay (default buffer size when None)
            assembler: Prompt assembler (default templates when None)
        """
        self.model = model
        self.chain = chain
        self.relay = relay or StreamRelay()
        self.assembler = assembler or PromptAssembler()

    async def ask(self, session: Session, question: str) -> RelayStream:
        """
        Stream a plain answer using the session history.

        Flow:
        1. Render session history
        2. Assemble the plain prompt
        3. Record the pending turn
        4. Open the relay over the model stream

        Args:
            session: Requesting session
            question: User question

        Returns:
            RelayStream: Answer fragments for the response body

        Raises:
            ModelUnavailable: The model failed before producing a fragment
        """
        history = session.history.render()
        prompt = self.assembler.plain(question, history)

        logger.info(
            f"{__name__}:ask - Streaming plain answer",
            extra={
                "session_id": session.session_id,
                "question": safe_log_value(question, max_length=100),
                "history_chars": len(history),
            },
        )

        turn = session.history.begin_turn(question)
        return await self.relay.open(
            self.model.stream(prompt),
            on_finish=self._recorder(session, turn),
        )

    async def rag(
        self,
        session: Session,
        question: str,
        history: str | None = None,
    ) -> RelayStream:
        """
        Stream a grounded answer from the session corpus.

        Args:
            session: Requesting session
            question: User question
            history: Client-supplied transcript used verbatim instead of the
                session history

        Returns:
            RelayStream: Answer fragments for the response body

        Raises:
            NotReady: No document was ever ingested for this session
            EmbeddingServiceError: The question could not be embedded
            ModelUnavailable: The model failed before producing a fragment
        """
        if not session.grounding_available:
            raise NotReady(session.session_id)

        rendered = history if history is not None else session.history.render()

        logger.info(
            f"{__name__}:rag - Streaming grounded answer",
            extra={
                "session_id": session.session_id,
                "question": safe_log_value(question, max_length=100),
                "client_history": history is not None,
            },
        )

        turn = session.history.begin_turn(question)
        return await self.relay.open(
            self.chain.answer(question, rendered, session.index),
            on_finish=self._recorder(session, turn),
        )

    @staticmethod
    def _recorder(session: Session, turn: ConversationTurn) -> FinishCallback:
        def record(outcome: RelayOutcome, text: str) -> None:
            if outcome is RelayOutcome.COMPLETED:
                session.history.complete(turn, text)
            else:
                session.history.fail(turn, text)
            logger.info(
                f"{__name__}:record - Turn {outcome.value}",
                extra={"session_id": session.session_id, "answer_chars": len(text)},
            )

        return record
