"""
Dependency injection container.

Factory functions for FastAPI dependencies. Clients for the embedding and
chat services are built lazily on first use and shared by every request.

Dependencies: nova.configs, nova.application, nova.core, nova.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends, Header
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel

from nova.application.services import ChatService, DocumentService
from nova.configs import Settings, get_settings
from nova.core.rag_query.model_client import ModelClient
from nova.core.rag_query.retrieval_chain import RetrievalChain
from nova.core.session.session_manager import Session, SessionManager
from nova.core.streaming.relay import StreamRelay


class ServiceCache:
    """Container for cached service instances."""

    def __init__(
        self,
        settings: Settings | None = None,
        embeddings: Embeddings | None = None,
        chat_model: BaseChatModel | None = None,
    ):
        self._settings = settings
        self._embeddings = embeddings
        self._chat_model = chat_model
        self._model_client = None
        self._session_manager = None
        self._chat_service = None
        self._document_service = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def embeddings(self) -> Embeddings:
        """Get cached embedding service client."""
        if self._embeddings is None:
            from nova.boundary.vdb.embeddings_wrapper import build_embeddings
            self._embeddings = build_embeddings(self.settings.vector_store)
        return self._embeddings

    @property
    def model_client(self) -> ModelClient:
        """Get cached model client."""
        if self._model_client is None:
            self._model_client = ModelClient.from_settings(
                self.settings.model, chat_model=self._chat_model
            )
        return self._model_client

    @property
    def session_manager(self) -> SessionManager:
        """Get cached session registry."""
        if self._session_manager is None:
            session_settings = self.settings.session
            self._session_manager = SessionManager(
                self.embeddings,
                share_index=session_settings.share_index,
                history_window=session_settings.history_window,
                embedding_timeout=self.settings.vector_store.timeout_seconds,
                max_sessions=session_settings.max_sessions,
                idle_ttl_seconds=session_settings.idle_ttl_seconds,
            )
        return self._session_manager

    @property
    def chat_service(self) -> ChatService:
        """Get cached chat service."""
        if self._chat_service is None:
            chain = RetrievalChain(
                self.model_client, top_k=self.settings.vector_store.top_k
            )
            self._chat_service = ChatService(
                model=self.model_client,
                chain=chain,
                relay=StreamRelay(self.settings.session.relay_buffer_size),
            )
        return self._chat_service

    @property
    def document_service(self) -> DocumentService:
        """Get cached document service."""
        if self._document_service is None:
            self._document_service = DocumentService(
                self.session_manager, settings=self.settings.ingestion
            )
        return self._document_service

    def clear(self):
        """Drop every cached instance, including all sessions."""
        if self._session_manager is not None:
            self._session_manager.clear()
        self._model_client = None
        self._session_manager = None
        self._chat_service = None
        self._document_service = None


@lru_cache
def get_service_cache() -> ServiceCache:
    """Get singleton service cache."""
    return ServiceCache()


def get_session_manager(
    cache: ServiceCache = Depends(get_service_cache),
) -> SessionManager:
    return cache.session_manager


def get_session_id(
    x_session_id: str | None = Header(default=None, alias="X-Session-ID"),
    cache: ServiceCache = Depends(get_service_cache),
) -> str:
    """Session identifier of the request; the default session without a header."""
    return (x_session_id or "").strip() or cache.settings.session.default_session_id


def get_session(
    session_id: str = Depends(get_session_id),
    sessions: SessionManager = Depends(get_session_manager),
) -> Session:
    """Resolve the requesting session, creating it on first use."""
    return sessions.get_or_create(session_id)


def find_session(
    session_id: str = Depends(get_session_id),
    sessions: SessionManager = Depends(get_session_manager),
) -> Session | None:
    """Resolve the requesting session only if it already exists."""
    return sessions.get(session_id)


def get_chat_service(
    cache: ServiceCache = Depends(get_service_cache),
) -> ChatService:
    return cache.chat_service


def get_document_service(
    cache: ServiceCache = Depends(get_service_cache),
) -> DocumentService:
    return cache.document_service
