"""
Document domain models and schemas.

Raw uploaded documents, their normalized extracted text, and upload responses.

Dependencies: pydantic
System role: Document ingestion contracts
"""

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """Uploaded file as received from the transport. Not retained after ingestion."""

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(description="Raw file bytes")
    media_type: str = Field(description="Declared MIME type")
    filename: str = Field(description="Original filename")

    @property
    def size(self) -> int:
        return len(self.content)


class ExtractedText(BaseModel):
    """Normalized text extracted from a document, whatever its format."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Plain text in reading order")
    media_type: str
    filename: str
    page_count: int = Field(default=1, ge=0, description="Pages, slides or 1 for flat text")

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


class DocumentUploadResponse(BaseModel):
    """Response schema for a processed upload."""

    message: str = Field(default="Document processed successfully.")
    filename: str
