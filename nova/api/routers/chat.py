"""
Chat API endpoints.

Routes: POST /ask, POST /rag, GET /history, DELETE /history

Answers stream as plain text, one fragment per chunk. Errors raised before
the first fragment become JSON errors; once streaming has begun a failure
just ends the body.

Dependencies: nova.application.services.chat_service, nova.api.deps
System role: Chat HTTP API
"""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import StreamingResponse

from nova.api.deps import find_session, get_chat_service, get_session
from nova.application.services.chat_service import ChatService
from nova.core.session.session_manager import Session
from nova.core.streaming.relay import RelayStream
from nova.models.chat import (
    AskRequest,
    ChatHistoryResponse,
    ChatMessageResponse,
    RagRequest,
)

router = APIRouter(tags=["chat"])

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


def _streaming_response(stream: RelayStream) -> StreamingResponse:
    return StreamingResponse(stream, media_type="text/plain", headers=STREAM_HEADERS)


@router.post("/ask")
async def ask(
    request: AskRequest,
    session: Session = Depends(get_session),
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """Stream a plain answer that uses the session's conversation history."""
    stream = await chat_service.ask(session, request.question)
    return _streaming_response(stream)


@router.post("/rag")
async def rag(
    request: RagRequest,
    session: Session = Depends(get_session),
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """
    Stream an answer grounded in the session's uploaded documents.

    Returns 400 until at least one document has been ingested.
    """
    stream = await chat_service.rag(session, request.question, request.history)
    return _streaming_response(stream)


@router.get("/history", response_model=ChatHistoryResponse)
async def get_history(
    session: Session | None = Depends(find_session),
) -> ChatHistoryResponse:
    """Completed turns of the session, oldest first. Unknown sessions are empty."""
    turns = session.history.renderable() if session is not None else []
    messages = [
        ChatMessageResponse(role=turn.speaker.value, content=turn.text)
        for turn in turns
    ]
    return ChatHistoryResponse(messages=messages, total=len(messages))


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(session: Session | None = Depends(find_session)) -> Response:
    if session is not None:
        session.history.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
