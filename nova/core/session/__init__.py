"""
Session state.

Exports: ConversationHistory, Session, SessionManager
"""

from nova.core.session.history import ConversationHistory
from nova.core.session.session_manager import Session, SessionManager

__all__ = ["ConversationHistory", "Session", "SessionManager"]
