"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_base_url: str | None = None
    openai_model: str = "gpt-5.2"
    openai_script_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = None
    openai_store: bool = False
    heygen_api_key: str
    heygen_base_url: str = "https://api.heygen.com"
    heygen_voice_id: str = "46d173f7d7d34ab186600619ba36e10a"
    video_poll_interval_seconds: float = 5.0
    video_poll_max_attempts: int = 180
    video_bucket: str = "course_audio"
    upload_bucket: str = "try-on-images"
    kling_access_key: str
    kling_secret_key: str
    kling_base_url: str = "https://api.klingai.com"
    try_on_poll_interval_seconds: float = 3.0
    try_on_timeout_seconds: float = 120.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
