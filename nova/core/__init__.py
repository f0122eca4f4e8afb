"""
Core business logic module.

Contains domain business logic, exception hierarchy, and core components.
All business rules and domain-specific logic reside here.
"""

from nova.core.exceptions import (
    DocumentProcessingError,
    EmbeddingServiceError,
    FileTooLarge,
    ModelUnavailable,
    NotReady,
    NovaException,
    ParsingError,
    UnsupportedMediaType,
    ValidationError,
)

__all__ = [
    "DocumentProcessingError",
    "EmbeddingServiceError",
    "FileTooLarge",
    "ModelUnavailable",
    "NotReady",
    "NovaException",
    "ParsingError",
    "UnsupportedMediaType",
    "ValidationError",
]
