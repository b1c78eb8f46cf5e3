"""
Configuration management using Pydantic Settings.
Loads environment variables from .env file with validation.
"""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Fireworks AI Configuration
    fireworks_api_key: str = Field(
        default="",
        description="Fireworks AI API key"
    )
    fireworks_llm_model: str = Field(
        default="accounts/fireworks/models/llama-v3p3-70b-instruct",
        description="Chat model used for the advisor"
    )
    llm_temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=300, ge=1)

    # MongoDB Configuration
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    mongodb_database: str = Field(
        default="life_insurance_leads",
        description="MongoDB database name"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # Logging
    log_level: str = Field(default="INFO")

    # Quoting
    quote_term_years: int = Field(
        default=20,
        description="Term length used for every generated quote"
    )
    sbli_enabled: bool = Field(
        default=True,
        description="Include the SBLI mock carrier in quote results"
    )

    @property
    def llm_configured(self) -> bool:
        """True when a real Fireworks key has been provided."""
        return bool(
            self.fireworks_api_key
            and self.fireworks_api_key != "your_fireworks_api_key_here"
        )

    @property
    def project_root(self) -> Path:
        """Get project root directory."""
        return Path(__file__).parent.parent


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
