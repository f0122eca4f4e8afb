"""
Language model configuration settings.

Chat model selection, sampling temperature, retry bound and per-call deadline.

Dependencies: pydantic, pydantic_settings
System role: ModelClient configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModelSettings(BaseSettings):
    """Chat model configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        protected_namespaces=(),
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    model_id: str = Field(
        default="gemini-2.5-flash",
        description="Google Gemini chat model identifier",
    )
    temperature: float = Field(default=0.4, description="Sampling temperature")
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for a model call before giving up (stream: only before first token)",
    )
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Deadline for a single-shot call or for each streamed read",
    )
