"""
Centralized configuration management with validation.

All environment variables are loaded and validated here.
This ensures consistent configuration across the application.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal, Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation."""

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    # API Configuration
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    API_RELOAD: bool = Field(default=False)
    EXPOSE_API_DOCS: bool = Field(default=False)

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # json or text

    # Environment
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # CORS - comma-separated list of allowed origins for production
    # e.g., "https://app.example.com,https://www.app.example.com"
    CORS_ORIGINS: Optional[str] = Field(default=None)


class ScoringConfig(BaseSettings):
    """
    Scoring engine settings.

    Benchmarks can be swapped without a code change by pointing
    SCORING_BENCHMARKS_FILE at a JSON scoring table.
    """
    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Path to a JSON scoring table. Unset = built-in benchmarks.
    benchmarks_file: Optional[str] = None

    # "tier": fixed 95/80/60/30 per grade
    # "interpolated": percentile moves across each benchmark band
    percentile_mode: Literal["tier", "interpolated"] = "tier"


# Global settings instances
settings = Settings()
scoring_config = ScoringConfig()
