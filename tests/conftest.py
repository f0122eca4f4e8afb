"""
Shared test fixtures and configuration for entire test suite.

Provides: Fake model and embeddings fixtures, indexes, sessions, app client
Dependencies: pytest, langchain_core fakes, fastapi
System role: Test infrastructure and fixture management
"""

import pytest
from fastapi.testclient import TestClient
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from nova.api.deps import ServiceCache, get_service_cache
from nova.boundary.vdb.faiss_store import FAISSIndex
from nova.configs import Settings
from nova.configs.model import ModelSettings
from nova.core.rag_query.model_client import ModelClient
from nova.core.session.session_manager import SessionManager
from nova.main import create_app

from tests.fakes import BagOfWordsEmbeddings


@pytest.fixture
def embeddings() -> BagOfWordsEmbeddings:
    """Provide deterministic bag-of-words embeddings."""
    return BagOfWordsEmbeddings()


@pytest.fixture
def index(embeddings: BagOfWordsEmbeddings) -> FAISSIndex:
    """Provide an empty FAISS index."""
    return FAISSIndex(embeddings, timeout_seconds=5)


@pytest.fixture
def paris_model() -> FakeListChatModel:
    """Provide a fake chat model that always answers the capital question."""
    return FakeListChatModel(responses=["The capital of France is Paris."])


@pytest.fixture
def model_client(paris_model: FakeListChatModel) -> ModelClient:
    """Provide a model client over the fake chat model, no backoff."""
    return ModelClient(paris_model, max_attempts=3, timeout_seconds=5, backoff_seconds=0)


@pytest.fixture
def session_manager(embeddings: BagOfWordsEmbeddings) -> SessionManager:
    """Provide a session registry with per-session indexes."""
    return SessionManager(embeddings, embedding_timeout=5)


@pytest.fixture
def test_settings() -> Settings:
    """Provide settings with a single model attempt so failure paths are fast."""
    return Settings(model=ModelSettings(max_attempts=1, timeout_seconds=5))


def build_client(
    settings: Settings,
    chat_model: BaseChatModel,
    embeddings: Embeddings,
) -> TestClient:
    """Build a TestClient whose service cache uses the given fakes."""
    app = create_app()
    cache = ServiceCache(settings=settings, embeddings=embeddings, chat_model=chat_model)
    app.dependency_overrides[get_service_cache] = lambda: cache
    return TestClient(app)


@pytest.fixture
def client(
    test_settings: Settings,
    paris_model: FakeListChatModel,
    embeddings: BagOfWordsEmbeddings,
) -> TestClient:
    """Provide a TestClient wired to fake model and embeddings."""
    return build_client(test_settings, paris_model, embeddings)


@pytest.fixture
def make_client():
    """Provide a factory for TestClients with custom settings or fakes."""
    return build_client
