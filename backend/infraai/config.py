from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Anthropic
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"

    # Sampling (fixed per deployment)
    llm_temperature: float = 1.0
    llm_top_p: Optional[float] = 0.95
    llm_top_k: int = 64
    llm_max_tokens: int = 8192  # Enough for a multi-group JSON design

    # Credit ledger (SQLite)
    credits_db_path: str = "user_credits.db"
    default_credits: int = 3

    # Clerk (identity provider)
    clerk_jwt_key: str = ""  # PEM public key used to verify session tokens
    clerk_jwt_algorithm: str = "RS256"
    clerk_secret_key: str = ""
    clerk_publishable_key: str = ""

    # Component catalog override (defaults to the bundled JSON)
    catalog_path: Optional[str] = None

    # App Settings
    cors_origins: str = "*"  # Comma-separated list
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
