"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    panelforge_env: str = "development"
    log_level: str = "info"

    # Page defaults
    default_page_size: str = "comic_standard"
    default_background_color: str = "#FFFFFF"
    default_quality: int = 90

    # Pins cosmetic randomness (bubble bumps, jag jitter, lightning paths)
    random_seed: int | None = None

    # Panel width assumed when a caption is rendered without a panel
    caption_fallback_panel_width: int = 500

    model_config = SettingsConfigDict(
        env_prefix="PANELFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
