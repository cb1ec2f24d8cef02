"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Annotated, Optional
import json
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="Fitva", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://user@localhost:5432/fitva",
        description="SQLAlchemy connection URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Text-generation provider (OpenAI-compatible)
    openai_api_key: Optional[str] = Field(
        default=None, description="API key for the text-generation provider"
    )
    openai_base_url: Optional[str] = Field(
        default=None, description="Override base URL for OpenAI-compatible providers"
    )
    llm_model: str = Field(default="gpt-4o-mini", description="Chat model name")
    llm_temperature: float = Field(
        default=0.0, ge=0, le=2, description="Sampling temperature"
    )
    llm_max_tokens: int = Field(default=1024, ge=1, description="Max reply tokens")
    llm_timeout_sec: float = Field(
        default=30.0, gt=0, description="Timeout for one provider call"
    )

    # Nutrition pipeline
    estimation_malformed_retries: int = Field(
        default=1, ge=0, le=3, description="Retries when the reply is not valid JSON"
    )
    nutrition_cache_enabled: bool = Field(
        default=True, description="Reuse recent estimates for identical descriptions"
    )
    nutrition_cache_ttl_days: int = Field(
        default=7, ge=0, description="Freshness window for cached estimates"
    )
    insights_min_meals: int = Field(
        default=5, ge=1, description="Logged meals required before insights"
    )
    insights_window_days: int = Field(
        default=7, ge=1, le=31, description="Days of history sent for insights"
    )
    default_calorie_goal: int = Field(
        default=2000,
        ge=0,
        description="Calorie goal used when a user has no computed target",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(default="Fitva API", description="API documentation title")
    api_description: str = Field(
        default="Calorie tracking with AI nutrition estimates and daily summaries",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, v):
        """Accept CORS_ORIGINS as a comma-separated string as well as a JSON list"""
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            return json.loads(v)
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT


# Global settings instance
settings = Settings()
