"""Domain models and API schemas."""

from nova.models.chat import (
    AskRequest,
    ChatHistoryResponse,
    ChatMessageResponse,
    ConversationTurn,
    RagRequest,
    Speaker,
    TurnStatus,
)
from nova.models.chunk import Chunk
from nova.models.document import Document, DocumentUploadResponse, ExtractedText
from nova.models.streaming import RelayOutcome, RelaySummary

__all__ = [
    "AskRequest",
    "ChatHistoryResponse",
    "ChatMessageResponse",
    "Chunk",
    "ConversationTurn",
    "Document",
    "DocumentUploadResponse",
    "ExtractedText",
    "RagRequest",
    "RelayOutcome",
    "RelaySummary",
    "Speaker",
    "TurnStatus",
]
