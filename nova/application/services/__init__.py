"""
Application services.

Exports: ChatService, DocumentService
"""

from nova.application.services.chat_service import ChatService
from nova.application.services.document_service import DocumentService

__all__ = ["ChatService", "DocumentService"]
