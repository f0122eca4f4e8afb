"""
Exception hierarchy for the Nova RAG service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.
Each exception carries the HTTP status it maps to before streaming begins.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class NovaException(Exception):
    """Base exception for all Nova application errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(NovaException):
    """Raised when input validation fails."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class UnsupportedMediaType(ValidationError):
    """Raised when an uploaded document has a media type ingestion cannot read."""

    def __init__(self, media_type: str, allowed: list[str] | None = None) -> None:
        super().__init__(
            f"Invalid file type: {media_type}. Allowed types: PDF, DOCX, PPTX, TXT.",
            field="file",
            details={"media_type": media_type, "allowed": allowed or []},
        )
        self.media_type = media_type


class FileTooLarge(ValidationError):
    """Raised when an upload exceeds the configured size limit."""

    code = "LIMIT_FILE_SIZE"

    def __init__(self, max_bytes: int, actual_bytes: int | None = None) -> None:
        details: dict[str, Any] = {"max_bytes": max_bytes}
        if actual_bytes is not None:
            details["actual_bytes"] = actual_bytes
        super().__init__(
            f"File too large. Max {max_bytes} bytes allowed.",
            field="file",
            details=details,
        )
        self.max_bytes = max_bytes


class NotReady(NovaException):
    """Raised when grounded retrieval is requested before any document was ingested."""

    status_code = 400

    def __init__(self, session_id: str | None = None) -> None:
        details = {"session_id": session_id} if session_id else None
        super().__init__(
            "RAG not ready. Please add documents first via /add-document.",
            details,
        )


class DocumentProcessingError(NovaException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ParsingError(DocumentProcessingError):
    """Raised when text extraction from a document fails."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        file_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize parsing error.

        Args:
            message: Error message
            document_id: ID of the document
            file_type: Media type of the file that failed parsing
            details: Additional context
        """
        details = details or {}
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, document_id, details)


class EmbeddingServiceError(DocumentProcessingError):
    """Raised when the embedding service fails or returns unusable vectors."""

    pass


class ModelUnavailable(NovaException):
    """Raised when the language model fails after retries are exhausted."""

    def __init__(
        self,
        message: str,
        attempts: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize model failure.

        Args:
            message: Error message
            attempts: Number of attempts made before giving up
            details: Additional context
        """
        details = details or {}
        if attempts is not None:
            details["attempts"] = attempts
        super().__init__(message, details)
