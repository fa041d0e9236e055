"""Spotify Web API client for OAuth and playlist tracks."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from diary_story.domain.context import TrackRef
from diary_story.services.playlist import PlaylistSource

SPOTIFY_ACCOUNTS_URL = "https://accounts.spotify.com"
SPOTIFY_API_URL = "https://api.spotify.com/v1"
SPOTIFY_SCOPES = ("playlist-read-private", "playlist-read-collaborative")


class SpotifyClient(PlaylistSource, Protocol):
    """Interface for Spotify authorization and playlist reads."""

    def authorize_url(self) -> str:
        """Return the URL that starts the authorization code flow."""

    async def exchange_code(self, code: str) -> dict[str, object]:
        """Exchange an authorization code for tokens."""


@dataclass
class HttpxSpotifyClient(SpotifyClient):
    """HTTPX-backed Spotify client using a long-lived refresh token."""

    client_id: str
    client_secret: str
    refresh_token: str | None
    playlist_id: str
    redirect_uri: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        client_id: str,
        client_secret: str,
        refresh_token: str | None,
        playlist_id: str,
        redirect_uri: str,
    ) -> "HttpxSpotifyClient":
        """Create a Spotify client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            refresh_token=refresh_token,
            playlist_id=playlist_id,
            redirect_uri=redirect_uri,
            http_client=httpx.AsyncClient(),
        )

    def authorize_url(self) -> str:
        """Return the URL that starts the authorization code flow."""
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(SPOTIFY_SCOPES),
        }
        return str(httpx.URL(f"{SPOTIFY_ACCOUNTS_URL}/authorize", params=params))

    async def exchange_code(self, code: str) -> dict[str, object]:
        """Exchange an authorization code for access and refresh tokens."""
        return await self._token_request(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
            }
        )

    async def refresh_access_token(self) -> str:
        """Return a fresh access token for the configured refresh token."""
        if not self.refresh_token:
            raise RuntimeError("Spotify refresh token is not configured")
        payload = await self._token_request(
            {"grant_type": "refresh_token", "refresh_token": self.refresh_token}
        )
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise RuntimeError("Could not refresh Spotify access token")
        return access_token

    async def fetch_tracks(self, limit: int) -> list[TrackRef]:
        """Fetch the first page of playlist tracks."""
        access_token = await self.refresh_access_token()
        url = f"{SPOTIFY_API_URL}/playlists/{self.playlist_id}/tracks"
        response = await self.http_client.get(
            url,
            params={"limit": limit},
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=15,
        )
        response.raise_for_status()
        payload = response.json()
        items = payload.get("items")
        if not isinstance(items, list):
            raise RuntimeError("Invalid playlist data")
        tracks: list[TrackRef] = []
        for item in items:
            track = item.get("track")
            if not track:
                continue
            artists = ", ".join(artist["name"] for artist in track.get("artists", []))
            tracks.append(TrackRef(title=track["name"], artist=artists))
        return tracks

    async def _token_request(self, data: dict[str, str]) -> dict[str, object]:
        response = await self.http_client.post(
            f"{SPOTIFY_ACCOUNTS_URL}/api/token",
            data=data,
            auth=(self.client_id, self.client_secret),
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
