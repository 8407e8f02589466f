"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; engines receive values explicitly.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode (exposes /docs). Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for bulk endpoints.
        cache_ttl_seconds: Lifetime of a cached metric.
        condition_refresh_seconds: Interval between condition re-samples.
        broadcast_interval_seconds: Interval between subscriber broadcasts.
        subscriber_send_timeout_seconds: Per-subscriber send deadline during
            a broadcast; slower subscribers are dropped.
        stream_max_history: Broadcast events kept for replay/status.
        stream_max_queue_size: Buffered events per SSE subscriber.
        realtime_enabled: Start the refresh/broadcast scheduler on startup.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "TradeGenie Market Engine"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    cache_ttl_seconds: float = Field(default=120.0, gt=0)
    condition_refresh_seconds: int = Field(default=60, ge=1)
    broadcast_interval_seconds: int = Field(default=30, ge=1)
    subscriber_send_timeout_seconds: float = Field(default=5.0, gt=0)
    stream_max_history: int = Field(default=200, ge=1)
    stream_max_queue_size: int = Field(default=100, ge=1)
    realtime_enabled: bool = True


settings = Settings()
