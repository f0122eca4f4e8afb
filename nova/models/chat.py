"""
Chat domain models and schemas.

Request/response schemas for chat operations and conversation turns.

Dependencies: pydantic
System role: Chat API contracts
"""

from enum import Enum

from pydantic import BaseModel, Field


class Speaker(str, Enum):
    """Who produced a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class TurnStatus(str, Enum):
    """Lifecycle of a conversation turn."""

    PENDING = "pending"
    COMPLETE = "complete"
    ERROR = "error"


class ConversationTurn(BaseModel):
    """
    Single turn of a conversation.

    Assistant turns start PENDING while their answer streams and end
    COMPLETE or ERROR. Only COMPLETE turns reach a prompt.
    """

    speaker: Speaker
    text: str = ""
    status: TurnStatus = TurnStatus.COMPLETE


class AskRequest(BaseModel):
    """Request schema for plain (ungrounded) questions."""

    question: str = Field(min_length=1, description="User question")


class RagRequest(BaseModel):
    """Request schema for grounded questions."""

    question: str = Field(min_length=1, description="User question")
    history: str | None = Field(
        default=None,
        description="Client-managed transcript used instead of the session history",
    )


class ChatMessageResponse(BaseModel):
    """Single chat message in history."""

    role: str = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")


class ChatHistoryResponse(BaseModel):
    """Response schema for chat history."""

    messages: list[ChatMessageResponse]
    total: int = Field(description="Total number of messages")
