"""
Core configuration module for the genalgo engine.

This module manages process-wide settings using Pydantic Settings, providing
type-safe configuration with environment variable and ``.env`` support.
Algorithm parameters live in ``src.genalgo.core.config``.
"""

from typing import Optional, Dict, Any, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via ``GENALGO_*`` environment variables;
    the logfire ones also accept the plain ``LOGFIRE_*`` names.
    """

    model_config = SettingsConfigDict(
        env_prefix="GENALGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    # Application settings
    app_name: str = "genalgo"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Logfire settings
    logfire_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GENALGO_LOGFIRE_TOKEN", "LOGFIRE_TOKEN")
    )
    logfire_service_name: str = Field(
        default="genalgo",
        validation_alias=AliasChoices("GENALGO_LOGFIRE_SERVICE_NAME", "LOGFIRE_SERVICE_NAME")
    )
    logfire_environment: str = Field(
        default="development",
        validation_alias=AliasChoices("GENALGO_LOGFIRE_ENVIRONMENT", "LOGFIRE_ENVIRONMENT")
    )
    logfire_console: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lower-case level names."""
        if isinstance(v, str):
            return v.upper()
        return v

    def get_logfire_settings(self) -> Dict[str, Any]:
        """Get Logfire configuration."""
        return {
            "token": self.logfire_token or None,
            "service_name": self.logfire_service_name,
            "environment": self.logfire_environment,
            "send_to_logfire": "if-token-present",
            "console": None if self.logfire_console else False,
        }

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


# Create global settings instance
settings = Settings()
