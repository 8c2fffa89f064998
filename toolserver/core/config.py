"""
Configuration management for the tool server.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLSERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(default=8080, description="Port to bind the server")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Log level")

    # Implementation advertised to clients
    app_name: str = Field(default="server")
    app_version: str = Field(default="v0.1.0")
    website_url: str = Field(default="http://localhost:8080")

    # Sessions
    client_id_header: str = Field(
        default="X-Client-ID",
        description="Request header carrying the caller's session identity",
    )

    # Tools
    tool_timeout_ms: int = Field(
        default=30000,
        ge=1,
        description="Max handler execution time in milliseconds",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {value}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
