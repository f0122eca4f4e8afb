"""
Session configuration settings.

Controls how conversation history and the document corpus are scoped.

Dependencies: pydantic, pydantic_settings
System role: Session registry and relay configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SessionSettings(BaseSettings):
    """Session scoping configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SESSION_",
        case_sensitive=False,
        extra="ignore",
    )

    default_session_id: str = Field(
        default="default",
        description="Session used when a request carries no X-Session-ID header",
    )
    share_index: bool = Field(
        default=False,
        description="Share one document corpus across all sessions",
    )
    history_window: int | None = Field(
        default=None,
        description="Most recent turns rendered into prompts (None = all)",
    )
    max_sessions: int = Field(
        default=1000,
        ge=1,
        description="Live sessions kept before the least recently used is evicted",
    )
    idle_ttl_seconds: float | None = Field(
        default=3600.0,
        gt=0,
        description="Idle seconds after which a session expires (None = never)",
    )
    relay_buffer_size: int = Field(
        default=64,
        ge=1,
        description="Capacity of the token channel between model and transport",
    )
