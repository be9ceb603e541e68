"""
Configuration Settings.

This module defines the package configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Monitoring Configuration Models
# =====================================================================


class LogfireConfig(BaseModel):
    """Pydantic Logfire configuration."""

    enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED", description="Enable Logfire monitoring")
    token: Optional[str] = Field(default=None, alias="LOGFIRE_TOKEN", description="Logfire write token")
    service_name: str = Field(
        default="ai-action", alias="LOGFIRE_SERVICE_NAME", description="Service name reported to Logfire"
    )
    environment: str = Field(
        default="development", alias="LOGFIRE_ENVIRONMENT", description="Deployment environment reported to Logfire"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Agent action settings model.

    All properties are automatically bound from environment variables and .env file.
    An action's own ``provider()`` / ``model()`` always take precedence over the
    defaults defined here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Provider Defaults
    # =====================================================================
    provider: str = Field(
        default="anthropic",
        description="Default provider key used when an action does not choose one",
        alias="AI_ACTION_PROVIDER",
    )
    model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Default model identifier used when an action does not choose one",
        alias="AI_ACTION_MODEL",
    )
    max_tokens: int = Field(
        default=2048,
        ge=1,
        description="Maximum number of tokens generated in a single action response",
        alias="AI_ACTION_MAX_TOKENS",
    )

    # =====================================================================
    # Background Execution
    # =====================================================================
    queue: str = Field(
        default="default",
        description="Queue name used when dispatching background action tasks",
        alias="AI_ACTION_QUEUE",
    )

    # =====================================================================
    # Logging
    # =====================================================================
    logging: bool = Field(
        default=False,
        description="Emit an 'ai-action.executed' log entry after every successful execution",
        alias="AI_ACTION_LOGGING",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="AI_ACTION_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="AI_ACTION_LOG_FORMAT",
    )

    # =====================================================================
    # Monitoring
    # =====================================================================
    logfire_enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED")
    logfire_token: Optional[str] = Field(default=None, alias="LOGFIRE_TOKEN")
    logfire_service_name: str = Field(default="ai-action", alias="LOGFIRE_SERVICE_NAME")
    logfire_environment: str = Field(default="development", alias="LOGFIRE_ENVIRONMENT")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def logfire(self) -> LogfireConfig:
        """Get Logfire configuration from environment variables."""
        return LogfireConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
