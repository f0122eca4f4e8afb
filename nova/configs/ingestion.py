"""
Document ingestion configuration settings.

Chunking policy and upload limits.

Dependencies: pydantic, pydantic_settings
System role: Ingestion pipeline configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
TEXT = "text/plain"


class IngestionSettings(BaseSettings):
    """Settings for document ingestion."""

    model_config = SettingsConfigDict(
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(default=500, gt=0, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(
        default=0,
        ge=0,
        description="Overlap between consecutive chunks",
    )
    max_file_size: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
    )
    allowed_media_types: list[str] = Field(
        default=[PDF, DOCX, PPTX, TEXT],
        description="Media types accepted by /add-document",
    )
