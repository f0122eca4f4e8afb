"""
Test suite for DocumentService.

Tests upload validation, media type resolution, grounding activation and
that rejected uploads have no side effects.

System role: Verification of document upload orchestration
"""

import pytest

from nova.application.services.document_service import DocumentService
from nova.configs.ingestion import TEXT, IngestionSettings
from nova.core.exceptions import FileTooLarge, UnsupportedMediaType, ValidationError
from nova.core.session.session_manager import Session, SessionManager


@pytest.fixture
def document_service(session_manager: SessionManager) -> DocumentService:
    """Provide document service with a small size limit."""
    return DocumentService(session_manager, settings=IngestionSettings(max_file_size=100))


@pytest.fixture
def session(session_manager: SessionManager) -> Session:
    """Provide the default session."""
    return session_manager.get_or_create("default")


class TestDocumentServiceValidate:
    """Test suite for DocumentService.validate method."""

    def test_validate_should_reject_missing_file(self, document_service: DocumentService) -> None:
        """Test a missing filename is a validation error."""
        with pytest.raises(ValidationError):
            document_service.validate(b"", TEXT, None)

    def test_validate_should_reject_oversized_file(self, document_service: DocumentService) -> None:
        """Test uploads over the limit raise FileTooLarge."""
        with pytest.raises(FileTooLarge) as exc_info:
            document_service.validate(b"x" * 101, TEXT, "big.txt")
        assert exc_info.value.message == "File too large. Max 100 bytes allowed."
        assert exc_info.value.code == "LIMIT_FILE_SIZE"

    def test_file_too_large_should_report_default_limit(self) -> None:
        """Test the default 10 MB limit message."""
        error = FileTooLarge(IngestionSettings().max_file_size)
        assert error.message == "File too large. Max 10485760 bytes allowed."

    def test_validate_should_reject_unsupported_type(self, document_service: DocumentService) -> None:
        """Test image uploads are rejected with the allowed types listed."""
        with pytest.raises(UnsupportedMediaType) as exc_info:
            document_service.validate(b"\x89PNG", "image/png", "a.png")
        assert exc_info.value.message == (
            "Invalid file type: image/png. Allowed types: PDF, DOCX, PPTX, TXT."
        )

    def test_resolve_media_type_should_guess_from_extension_when_generic(
        self, document_service: DocumentService
    ) -> None:
        """Test octet-stream uploads fall back to the filename extension."""
        assert document_service.resolve_media_type("application/octet-stream", "notes.txt") == TEXT
        assert document_service.resolve_media_type("text/plain; charset=utf-8", "x.bin") == TEXT


class TestDocumentServiceUpload:
    """Test suite for DocumentService.upload method."""

    @pytest.mark.asyncio
    async def test_upload_should_ingest_and_enable_grounding(
        self, document_service: DocumentService, session: Session
    ) -> None:
        """Test a valid upload populates the index and grounds the session."""
        # Act
        result = await document_service.upload(session, b"The capital of France is Paris.", TEXT, "f.txt")

        # Assert
        assert result.chunk_count == 1
        assert session.index.is_ready
        assert session.grounding_available

    @pytest.mark.asyncio
    async def test_rejected_upload_should_have_no_side_effects(
        self, document_service: DocumentService, session: Session
    ) -> None:
        """Test an oversized upload leaves index and grounding unchanged."""
        # Act
        with pytest.raises(FileTooLarge):
            await document_service.upload(session, b"x" * 500, TEXT, "big.txt")

        # Assert
        assert not session.index.is_ready
        assert not session.grounding_available

    @pytest.mark.asyncio
    async def test_grounding_should_survive_later_failed_upload(
        self, document_service: DocumentService, session: Session
    ) -> None:
        """Test a failed upload never turns grounding off again."""
        # Arrange
        await document_service.upload(session, b"Some text.", TEXT, "ok.txt")

        # Act
        with pytest.raises(UnsupportedMediaType):
            await document_service.upload(session, b"gif", "image/gif", "a.gif")

        # Assert
        assert session.grounding_available
