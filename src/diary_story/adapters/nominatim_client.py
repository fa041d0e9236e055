"""OpenStreetMap Nominatim reverse geocoding client."""

from dataclasses import dataclass

import httpx

from diary_story.services.location import ReverseGeocoder


@dataclass
class HttpxNominatimClient(ReverseGeocoder):
    """HTTPX-backed reverse geocoder."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxNominatimClient":
        """Create a Nominatim client with a managed httpx session."""
        return cls(
            base_url=base_url, user_agent=user_agent, http_client=httpx.AsyncClient()
        )

    async def reverse(self, latitude: float, longitude: float) -> dict[str, object]:
        """Reverse geocode a coordinate pair."""
        response = await self.http_client.get(
            f"{self.base_url}/reverse",
            params={"lat": latitude, "lon": longitude, "format": "json"},
            headers={"User-Agent": self.user_agent},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
