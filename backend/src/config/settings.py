"""
Application settings configuration for the release server.

Centralized settings loaded from environment variables.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment Variables:
        APP_URL: Public origin used to build every download link
            (default: "http://localhost:8000")
        RELEASE_SERVER_ASSET_DIR: Directory holding release asset files,
            laid out as <asset_dir>/<version>/<filename> (default: "assets")
        RELEASE_SERVER_DEFAULT_CHANNEL: Channel assumed when a client does
            not name one (default: "stable")
    """

    # Base URL for download links
    app_url: str = Field(
        default="http://localhost:8000",
        validation_alias="APP_URL",
        description="Public origin of the release server (scheme://host[:port])"
    )

    # File storage for release assets
    asset_dir: str = Field(
        default="assets",
        validation_alias="RELEASE_SERVER_ASSET_DIR",
        description="Directory containing release asset files"
    )

    default_channel: str = Field(
        default="stable",
        validation_alias="RELEASE_SERVER_DEFAULT_CHANNEL",
        min_length=1,
        description="Release channel used when the client does not specify one"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @field_validator("app_url")
    @classmethod
    def validate_app_url(cls, v: str) -> str:
        """Validate that the app URL is an absolute http(s) origin."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("APP_URL must start with http:// or https://")
        return v


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings instance.

    Returns:
        AppSettings: Configured application settings from environment
    """
    return AppSettings()
