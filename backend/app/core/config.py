"""
Centralized configuration management.

All application configuration is loaded and validated here.
"""
import os
import logging
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

VALID_PALETTES = ("default", "vibrant")


class Settings(BaseModel):
    """Application settings with validation."""

    # Dataset limits
    max_dataset_rows: int = Field(default=100000, ge=1, le=1000000, description="Maximum rows per dataset")
    max_dataset_columns: int = Field(default=1000, ge=1, le=10000, description="Maximum columns per dataset")

    # Rate limiting
    rate_limit_per_minute: int = Field(default=60, ge=1, le=1000, description="Rate limit per minute per IP")

    # Request timeout
    request_timeout_seconds: int = Field(default=30, ge=1, le=3600, description="Request timeout in seconds")

    # CORS
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Charts
    chart_palette: str = Field(default="default", description="Active colour palette")

    # Dataset sessions
    session_ttl_seconds: int = Field(default=3600, ge=1, description="Lifetime of a loaded dataset in seconds")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got '{v}'")
        return v.upper()

    @field_validator('chart_palette')
    @classmethod
    def validate_chart_palette(cls, v: str) -> str:
        if v.lower() not in VALID_PALETTES:
            raise ValueError(f"CHART_PALETTE must be one of {list(VALID_PALETTES)}, got '{v}'")
        return v.lower()

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            max_dataset_rows=int(os.getenv("MAX_DATASET_ROWS", "100000")),
            max_dataset_columns=int(os.getenv("MAX_DATASET_COLUMNS", "1000")),
            rate_limit_per_minute=int(os.getenv("RATE_LIMIT_PER_MINUTE", "60")),
            request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT_SECONDS", "30")),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            chart_palette=os.getenv("CHART_PALETTE", "default"),
            session_ttl_seconds=int(os.getenv("SESSION_TTL_SECONDS", "3600")),
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        logger.info("Configuration loaded and validated successfully")
    return _settings


def reload_settings() -> Settings:
    """Reload settings (useful for testing)."""
    global _settings
    _settings = None
    return get_settings()
