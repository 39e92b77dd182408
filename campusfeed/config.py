"""
Application configuration using environment variables.
"""
import os
from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Campus Feed API"
    debug: bool = False
    environment: str = "development"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./campusfeed.db")

    # Shared counter store for rate limiting (redis://...); empty disables limiting
    rate_limit_storage_url: str = os.getenv("REDIS_URL", "")

    # CORS
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Rate limiting (fixed window per user)
    rate_limit_requests: int = 20
    rate_limit_window_seconds: int = 60

    # Content
    content_max_length: int = 300

    # Feeds
    feed_default_page_size: int = 30
    feed_max_page_size: int = 100
    trending_window_days: int = 7

    # Moderation (OpenAI-compatible chat completions endpoint)
    moderation_enabled: bool = True
    moderation_api_key: str = os.getenv("GITHUB_TOKEN", "")
    moderation_base_url: str = "https://models.github.ai/inference"
    moderation_model: str = "openai/gpt-4o"
    moderation_timeout_seconds: float = 10.0

    # Background tasks
    task_workers: int = 2

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
