"""Configuration loading for the runwatch notification system.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discord configuration
    discord_token: str = Field(
        default="",
        description="Discord bot token",
    )
    discord_channel_id: int = Field(
        default=0,
        description="Channel that receives run and stream announcements",
    )
    admin_channel_id: int = Field(
        default=0,
        description="Channel in which admin commands are accepted",
    )
    admin_role_id: int = Field(
        default=0,
        description="Role required to run admin commands",
    )

    # Twitch configuration
    twitch_client_id: str = Field(
        default="",
        description="Twitch application client id",
    )
    twitch_oauth_token: str = Field(
        default="",
        description="Twitch OAuth bearer token",
    )

    # Data source endpoints
    speedrun_api_url: str = Field(
        default="https://www.speedrun.com/api/v1",
        description="speedrun.com REST API base URL",
    )
    twitch_api_url: str = Field(
        default="https://api.twitch.tv/helix",
        description="Twitch Helix API base URL",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        description="Transport timeout for every HTTP request",
    )

    # Registry configuration
    store_sqlite_path: str = Field(
        default="./data/runners.db",
        description="SQLite database file path",
    )

    # Sweep configuration
    run_poll_delay_seconds: float = Field(
        default=10.0,
        description="Delay before each runner's fetch",
    )
    stream_poll_delay_seconds: float = Field(
        default=10.0,
        description="Delay before each streamer's fetch",
    )
    track_runs: bool = Field(
        default=True,
        description="Run the personal-best sweep loop",
    )
    track_streams: bool = Field(
        default=True,
        description="Run the live stream sweep loop",
    )
    thumbnail_width: int = Field(
        default=1280,
        description="Width substituted into stream thumbnail URLs",
    )
    thumbnail_height: int = Field(
        default=720,
        description="Height substituted into stream thumbnail URLs",
    )

    # Notification configuration
    notification_backend: Literal["discord", "stdout"] = Field(
        default="discord",
        description="Notification backend type",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Run mode
    run_mode: Literal["daemon", "cli"] = Field(
        default="daemon",
        description="Run mode",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("run_poll_delay_seconds", "stream_poll_delay_seconds")
    @classmethod
    def validate_poll_delay(cls, v: float) -> float:
        """Ensure poll delays are non-negative."""
        if v < 0:
            raise ValueError("poll delays must be non-negative")
        return v

    @field_validator("http_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Ensure the HTTP timeout is positive."""
        if v <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        return v

    @field_validator("thumbnail_width", "thumbnail_height")
    @classmethod
    def validate_thumbnail_size(cls, v: int) -> int:
        """Ensure thumbnail dimensions are positive."""
        if v <= 0:
            raise ValueError("thumbnail dimensions must be positive")
        return v

    @field_validator("discord_channel_id", "admin_channel_id", "admin_role_id")
    @classmethod
    def validate_discord_id(cls, v: int) -> int:
        """Ensure Discord ids are non-negative."""
        if v < 0:
            raise ValueError("Discord ids must be non-negative")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
