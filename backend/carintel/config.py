"""
Configuration management for CarIntel backend.
Uses pydantic-settings for environment variable handling.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # API Configuration
    api_title: str = "CarIntel API"
    api_version: str = "1.0.0"
    debug: bool = False

    # Redis Configuration (unset = VIN analyses are never cached)
    redis_url: str | None = None
    vin_cache_ttl_seconds: int = 604800  # 7 days

    # Outbound request timeouts (seconds)
    fetch_timeout: float = 15.0
    vin_decode_timeout: float = 10.0
    recall_timeout: float = 10.0

    # Browser automation
    browser_profile: Literal["local", "serverless"] = "local"
    chromium_executable_path: str = "/opt/chromium/chromium"
    browser_timeout_seconds: float = 30.0
    service_tab_settle_ms: int = 1500

    # Request budgets
    analysis_budget_seconds: float = 60.0
    batch_import_max_urls: int = 25


# Global settings instance
settings = Settings()
