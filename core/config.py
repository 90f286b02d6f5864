"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="Expense Tracker API", alias="APP_NAME")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Categorization gateway (OpenAI-compatible chat completions)
    llm_api_key: str = Field(default="", alias="LLM_API_KEY")
    llm_gateway_url: str = Field(
        default="https://api.groq.com/openai/v1/chat/completions",
        alias="LLM_GATEWAY_URL"
    )
    llm_model: str = Field(default="llama-3.1-8b-instant", alias="LLM_MODEL")
    llm_timeout: int = Field(default=10, alias="LLM_TIMEOUT")
    llm_verify_ssl: bool = Field(default=True, alias="LLM_VERIFY_SSL")

    # Ingestion
    category_timeout: float = Field(default=15.0, alias="CATEGORY_TIMEOUT")
    max_concurrent_llm_calls: int = Field(default=5, alias="MAX_CONCURRENT_LLM_CALLS")
    date_dayfirst: bool = Field(default=False, alias="DATE_DAYFIRST")

    # Storage
    temp_storage_path: str = Field(default="uploads", alias="STORAGE_PATH")
    database_path: str = Field(default="expenses.db", alias="DATABASE_PATH")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("max_concurrent_llm_calls")
    @classmethod
    def validate_concurrency(cls, v):
        """Validate concurrency setting."""
        if v < 1:
            raise ValueError("Max concurrent LLM calls must be at least 1")
        if v > 50:
            raise ValueError("Max concurrent LLM calls should not exceed 50")
        return v

    @field_validator("category_timeout")
    @classmethod
    def validate_category_timeout(cls, v):
        if v <= 0:
            raise ValueError("Category timeout must be positive")
        return v

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.temp_storage_path).mkdir(parents=True, exist_ok=True)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.ensure_directories()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
