"""Location reporting sinks."""

import logging
from dataclasses import dataclass

import httpx

from diary_story.services.location import LocationReporter

_logger = logging.getLogger(__name__)

LOCATION_RECEIVED = "Location received"


@dataclass
class LoggingLocationReporter(LocationReporter):
    """In-process sink that logs received coordinates."""

    async def report(self, latitude: float, longitude: float) -> str:
        _logger.info("Location received: lat=%s, lon=%s", latitude, longitude)
        return LOCATION_RECEIVED


@dataclass
class HttpxLocationReporter(LocationReporter):
    """Forward coordinates to a remote ``POST /location`` sink."""

    sink_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, sink_url: str) -> "HttpxLocationReporter":
        """Create a reporter with a managed httpx session."""
        return cls(sink_url=sink_url, http_client=httpx.AsyncClient())

    async def report(self, latitude: float, longitude: float) -> str:
        """Post coordinates and return the sink's status."""
        response = await self.http_client.post(
            f"{self.sink_url}/location",
            json={"latitude": latitude, "longitude": longitude},
            timeout=10,
        )
        response.raise_for_status()
        return str(response.json().get("status", ""))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
