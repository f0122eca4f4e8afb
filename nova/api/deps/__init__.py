"""Dependency injection for API routes."""

from nova.api.deps.dependencies import (
    ServiceCache,
    find_session,
    get_chat_service,
    get_document_service,
    get_service_cache,
    get_session,
    get_session_id,
    get_session_manager,
)

__all__ = [
    "ServiceCache",
    "find_session",
    "get_chat_service",
    "get_document_service",
    "get_service_cache",
    "get_session",
    "get_session_id",
    "get_session_manager",
]
