"""
Application configuration using Pydantic Settings.

Loads configuration from CLIMATESYNC_* environment variables and .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from climatesync.shared.domain.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="CLIMATESYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="climatesync", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")

    # Work-tracking connection
    collection_url: str | None = Field(
        default=None,
        description="Collection URL, e.g. https://dev.azure.com/org",
    )
    project: str | None = Field(default=None, description="Project name")
    access_token: str | None = Field(default=None, description="Bearer access token")
    api_version: str = Field(default="6.0", description="REST API version")
    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

    # Synchronization
    work_item_type: str = Field(default="Bug", description="Work item type to create")
    max_concurrency: int = Field(default=8, ge=1, description="Issues synced in parallel")

    # Logging / Privacy
    log_redaction_enabled: bool = Field(default=True, description="Enable token redaction in logs")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"

    def require_connection(self) -> None:
        """Fail fast when the connection settings are incomplete."""
        missing = [
            name
            for name in ("collection_url", "project", "access_token")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                "Missing connection settings: " + ", ".join(missing),
                context={"missing": missing},
            )


# Global settings instance
settings = Settings()
