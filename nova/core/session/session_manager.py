"""
Session registry.

Maps a session identifier to its conversation history and document index.
Replaces process-wide mutable state: every request resolves its Session
here and passes it down explicitly.

Dependencies: langchain_core.embeddings, nova.boundary.vdb, nova.core.session.history
System role: Session lifecycle (process memory only)
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from langchain_core.embeddings import Embeddings

from nova.boundary.vdb.faiss_store import FAISSIndex
from nova.core.session.history import ConversationHistory

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Conversation state and corpus handle for one session."""

    session_id: str
    history: ConversationHistory
    index: FAISSIndex
    grounding_available: bool = field(default=False)
    last_used: float = field(default=0.0)

    def mark_grounded(self) -> None:
        """Enable grounded answers. Never reset for the life of the process."""
        self.grounding_available = True


class SessionManager:
    """
    Create and look up sessions by identifier.

    Session identifiers come from clients, so the registry is bounded: idle
    sessions expire after a TTL and, past the cap, the least recently used
    session is evicted. Evicting a session drops its history and, unless the
    corpus is shared, its index. Requests already holding the Session finish
    normally.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        share_index: bool = False,
        history_window: int | None = None,
        embedding_timeout: float = 30.0,
        max_sessions: int = 1000,
        idle_ttl_seconds: float | None = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the registry.

        Args:
            embeddings: Embedding service client used by every index
            share_index: Give all sessions one corpus instead of one each
            history_window: Turn window passed to each ConversationHistory
            embedding_timeout: Deadline for embedding calls
            max_sessions: Live sessions kept before evicting the least recently used
            idle_ttl_seconds: Idle time after which a session expires (None = never)
            clock: Monotonic time source
        """
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._embeddings = embeddings
        self._share_index = share_index
        self._history_window = history_window
        self._embedding_timeout = embedding_timeout
        self._max_sessions = max_sessions
        self._idle_ttl = idle_ttl_seconds
        self._clock = clock
        # Least recently used first
        self._sessions: OrderedDict[str, Session] = OrderedDict()
        self._shared_index: FAISSIndex | None = None
        self._shared_grounded = False

    @property
    def share_index(self) -> bool:
        return self._share_index

    def __contains__(self, session_id: str) -> bool:
        self._expire()
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> Session | None:
        """
        Return a live session without creating one.

        Args:
            session_id: Session identifier

        Returns:
            Session | None: The session, or None if unknown or expired
        """
        self._expire()
        session = self._sessions.get(session_id)
        if session is not None:
            self._touch(session)
        return session

    def get_or_create(self, session_id: str) -> Session:
        """
        Return the session for an identifier, creating it on first use.

        Args:
            session_id: Session identifier

        Returns:
            Session: Existing or newly created session
        """
        session = self.get(session_id)
        if session is None:
            session = Session(
                session_id=session_id,
                history=ConversationHistory(max_turns=self._history_window),
                index=self._index_for(session_id),
            )
            if self._share_index and self._shared_grounded:
                session.mark_grounded()
            self._sessions[session_id] = session
            self._touch(session)
            logger.info("Session created", extra={"session_id": session_id})
            while len(self._sessions) > self._max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info(
                    "Session evicted",
                    extra={"session_id": evicted_id, "reason": "capacity"},
                )
        return session

    def mark_grounded(self, session: Session) -> None:
        """
        Record a successful ingestion.

        With a shared corpus every session, present and future, can ground.
        """
        if self._share_index:
            self._shared_grounded = True
            for other in self._sessions.values():
                other.mark_grounded()
        session.mark_grounded()

    def _touch(self, session: Session) -> None:
        session.last_used = self._clock()
        self._sessions.move_to_end(session.session_id)

    def _expire(self) -> None:
        if self._idle_ttl is None:
            return
        cutoff = self._clock() - self._idle_ttl
        # Oldest first, so stop at the first session still in use
        while self._sessions:
            session_id, session = next(iter(self._sessions.items()))
            if session.last_used > cutoff:
                break
            del self._sessions[session_id]
            logger.info(
                "Session evicted",
                extra={"session_id": session_id, "reason": "idle"},
            )

    def _index_for(self, session_id: str) -> FAISSIndex:
        if self._share_index:
            if self._shared_index is None:
                self._shared_index = FAISSIndex(
                    self._embeddings,
                    timeout_seconds=self._embedding_timeout,
                    name="shared",
                )
            return self._shared_index
        return FAISSIndex(
            self._embeddings,
            timeout_seconds=self._embedding_timeout,
            name=session_id,
        )

    def clear(self) -> None:
        self._sessions.clear()
        self._shared_index = None
        self._shared_grounded = False
