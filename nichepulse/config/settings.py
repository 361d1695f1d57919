"""
Configuration settings for NichePulse
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # RapidAPI scrapers
    rapidapi_key: Optional[str] = None
    instagram_rapidapi_key: Optional[str] = None
    tiktok_api_host: str = "tiktok-scraper2.p.rapidapi.com"
    instagram_api_host: str = "instagram-scraper-stable-api.p.rapidapi.com"

    # OpenAI (vision tier)
    openai_api_key: Optional[str] = None
    openai_vision_model: str = "gpt-4o-mini"

    # Google Gemini (text tier)
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_models: list[str] = ["gemini-2.5-flash", "gemini-2.0-flash", "gemini-1.5-flash"]

    # Deepgram (spoken hooks)
    deepgram_api_key: Optional[str] = None
    deepgram_model: str = "nova-2"
    spoken_hook_videos: int = 10
    transcription_interval_seconds: float = 0.5

    # Supabase
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_key: Optional[str] = None

    # Stripe
    stripe_secret_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    stripe_starter_monthly_price_id: Optional[str] = None
    stripe_starter_yearly_price_id: Optional[str] = None
    stripe_pro_monthly_price_id: Optional[str] = None
    stripe_pro_yearly_price_id: Optional[str] = None

    # Content filter thresholds
    min_views: int = 50_000
    max_views: int = 10_000_000
    max_age_days: int = 45

    # Instagram reels thresholds
    instagram_min_views: int = 10_000
    instagram_max_age_days: int = 30
    instagram_creators_per_niche: int = 3
    instagram_reels_per_creator: int = 10
    instagram_request_interval_seconds: float = 0.3

    # Fetch / extraction sizing
    desired_video_count: int = 20
    first_pass_hashtags: int = 4
    videos_per_hashtag: int = 30
    max_vision_images: int = 8
    max_image_bytes: int = 5 * 1024 * 1024
    http_timeout_seconds: float = 30.0

    # Session
    session_cookie_name: str = "np_session"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get application settings singleton"""
    return Settings()
