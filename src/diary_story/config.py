"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-4o-mini"
    openai_vision_model: str = "gpt-4o-mini"
    image_descriptor: str = "stub"
    spotify_client_id: str
    spotify_client_secret: str
    spotify_refresh_token: str | None = None
    spotify_playlist_id: str
    base_url: str = "http://localhost:5000"
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "diary-story/0.1"
    location_sink_url: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def spotify_redirect_uri(self) -> str:
        return f"{self.base_url.rstrip('/')}/auth/spotify/callback"


def parse_playlist_id(raw: str) -> str:
    """Extract a playlist id from either a bare id or a share URL."""
    cleaned = raw.strip()
    if "playlist/" in cleaned:
        cleaned = cleaned.split("playlist/", maxsplit=1)[1]
    return cleaned.split("?", maxsplit=1)[0]
