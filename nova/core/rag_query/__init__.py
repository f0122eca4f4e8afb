"""
Query answering: prompt assembly, model access, retrieval chain.

Exports: PromptAssembler, ModelClient, build_chat_model, RetrievalChain
"""

from nova.core.rag_query.model_client import ModelClient, build_chat_model
from nova.core.rag_query.prompt import PromptAssembler
from nova.core.rag_query.retrieval_chain import RetrievalChain

__all__ = ["ModelClient", "PromptAssembler", "RetrievalChain", "build_chat_model"]
