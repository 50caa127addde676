"""
Configuration settings for the Pulse Intercept Engine
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google Gemini
    gemini_api_key: Optional[str] = Field(default=None)
    google_api_key: Optional[str] = Field(default=None)

    # Paid key used for Veo video jobs (selected once per session)
    pulse_video_api_key: Optional[str] = Field(default=None)

    # Models
    classifier_model: str = Field(default="gemini-3-flash-preview")
    sweep_model: str = Field(default="gemini-3-flash-preview")
    identity_model: str = Field(default="gemini-3-pro-preview")
    image_model: str = Field(default="gemini-2.5-flash-image")
    video_model: str = Field(default="veo-3.1-fast-generate-preview")

    # Streaming aggregator
    default_topic: str = Field(default="Global High-Frequency Intercepts")
    live_by_default: bool = Field(default=True)
    refresh_interval_seconds: float = Field(default=20.0, gt=0)
    max_news_items: int = Field(default=100, ge=1)

    # Video pipeline
    video_poll_interval_seconds: float = Field(default=10.0, gt=0)
    # 0 disables the ceiling; the poll loop then runs until the job resolves
    video_max_wait_seconds: float = Field(default=0.0, ge=0)
    video_download_timeout_seconds: float = Field(default=120.0, gt=0)
    key_selection_timeout_seconds: float = Field(default=300.0, gt=0)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Paths
    output_dir: str = Field(default="output")

    @property
    def api_key(self) -> Optional[str]:
        """The key used for all standard Gemini calls."""
        return self.google_api_key or self.gemini_api_key


@lru_cache
def get_settings() -> Settings:
    """Get application settings singleton"""
    return Settings()
