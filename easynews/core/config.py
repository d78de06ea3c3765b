"""Application configuration using Pydantic Settings.

This module defines the runtime configuration loaded from environment variables.
Configuration is validated at startup and provides type-safe access throughout the app.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration.

    All configuration is loaded from environment variables or .env file.
    Validation happens automatically via Pydantic.

    Example:
        >>> config = Config()
        >>> print(config.app_name)
        'easy-news'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================
    # Application Settings
    # ============================================
    app_name: str = Field(default="easy-news", description="Application name")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", description="Application environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    # ============================================
    # LLM & AI APIs
    # ============================================
    openai_api_key: str = Field(default="", description="OpenAI API key")
    anthropic_api_key: str = Field(default="", description="Anthropic API key")

    # LLM Model Settings (LiteLLM format: provider/model-name)
    # Lightweight tasks (simplification, classification)
    llm_model_light: str = Field(
        default="openai/gpt-4o-mini",
        description="LLM model for lightweight tasks (simplification, classification)",
    )
    llm_model_light_max_tokens: int = Field(
        default=1200, description="Max tokens for lightweight LLM tasks", ge=100, le=4000
    )

    # Heavy tasks (digest writing)
    llm_model_heavy: str = Field(
        default="openai/gpt-4.1",
        description="LLM model for heavy tasks (digest writing)",
    )
    llm_model_heavy_max_tokens: int = Field(
        default=1600, description="Max tokens for heavy LLM tasks", ge=500, le=8000
    )
    llm_timeout_seconds: int = Field(
        default=60, description="Per-request LLM timeout", ge=5, le=600
    )

    # ============================================
    # Stock Photography
    # ============================================
    pexels_api_key: str = Field(default="", description="Pexels API key")

    # ============================================
    # Pipeline Run
    # ============================================
    output_dir: str = Field(default="./output", description="Directory for JSON artifacts")
    run_timeout_seconds: float = Field(
        default=1800.0, description="Upper bound for a whole pipeline run", gt=0
    )
    classification_concurrency: int = Field(
        default=4, description="Parallel classifier calls in the primary pass", ge=1, le=32
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode.

        Returns:
            True if app_env is 'development'
        """
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if app_env is 'production'
        """
        return self.app_env == "production"


# =============================================================================
# Singleton accessor
# =============================================================================

_config: Config | None = None


def get_config() -> Config:
    """Get the global Config singleton.

    Returns:
        The global Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
