"""Application settings and configuration."""

from functools import lru_cache
from typing import ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="orgwalk", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=8000, description="Port to bind to")
    log_level: str = Field(default="INFO", description="Root log level")

    # CORS
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )

    # Directory service
    directory_base_url: str = Field(
        default="https://api.justsift.com/v1",
        description="Base URL of the organizational directory API",
    )
    directory_data_token: str = Field(
        default="", description="Bearer token for the JSON endpoints"
    )
    directory_media_token: str | None = Field(
        default=None, description="Token embedded in media URLs (never sent as header)"
    )
    directory_timeout_seconds: float = Field(
        default=15.0,
        description="Upper bound for one logical request, retries included",
    )
    directory_max_attempts: int = Field(
        default=3, description="Attempts per request for transient failures"
    )
    directory_backoff_base_seconds: float = Field(
        default=0.25, description="Exponential backoff base unit"
    )
    directory_backoff_jitter_seconds: float = Field(
        default=0.1, description="Upper bound of the random jitter added to backoff"
    )

    # Schema cache
    schema_cache_ttl_seconds: float = Field(
        default=600.0, description="Time-to-live of the cached field schema"
    )

    # Traversal
    superior_field: str = Field(
        default="teamLeaderId",
        description="Field holding an entity's superior identifier",
    )
    subtree_max_depth: int = Field(default=6, description="Default subtree depth cap")
    subtree_max_nodes: int = Field(
        default=1000, description="Default subtree node-count cap"
    )
    search_page_size: int = Field(
        default=100, description="Page size requested from the search endpoint"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
