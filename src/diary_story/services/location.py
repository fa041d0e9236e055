"""Location collection with reverse geocoding and user confirmation."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from diary_story.domain.context import Coordinates, LocationInfo
from diary_story.domain.errors import (
    GeolocationError,
    GeolocationErrorKind,
    ReverseGeocodeFailed,
)
from diary_story.services.session import DiarySession

_logger = logging.getLogger(__name__)

REPORT_SENT = "Location sent successfully!"
REPORT_FAILED = "Failed to send location."

GEOLOCATION_MESSAGES = {
    GeolocationErrorKind.PERMISSION_DENIED: (
        "Location permission denied. Please allow access."
    ),
    GeolocationErrorKind.POSITION_UNAVAILABLE: (
        "Location unavailable. Try again in a clear area."
    ),
    GeolocationErrorKind.TIMEOUT: "Location request timed out. Try again.",
    GeolocationErrorKind.UNKNOWN: "Unable to get location.",
}

LocationConfirmer = Callable[[str], Awaitable[str | None]]


@dataclass(frozen=True)
class GeolocationOptions:
    """Options passed to the geolocation capability."""

    high_accuracy: bool = True
    timeout_ms: int = 10000
    max_cached_age_ms: int = 0


GEOLOCATION_OPTIONS = GeolocationOptions()


class GeolocationProvider(Protocol):
    """Interface for the device position capability."""

    async def current_position(self, options: GeolocationOptions) -> Coordinates:
        """Return the current position or raise ``GeolocationError``."""


class ReverseGeocoder(Protocol):
    """Interface for turning coordinates into a place name."""

    async def reverse(self, latitude: float, longitude: float) -> dict[str, object]:
        """Return the raw reverse geocoding payload."""


class LocationReporter(Protocol):
    """Interface for the coordinate reporting sink."""

    async def report(self, latitude: float, longitude: float) -> str:
        """Forward coordinates and return the sink's status string."""


@dataclass(frozen=True)
class LocationOutcome:
    """Result of one location request."""

    location: LocationInfo | None
    message: str
    report_status: str | None = None


@dataclass
class LocationResolver:
    """Collect the device location into the session."""

    session: DiarySession
    geocoder: ReverseGeocoder
    reporter: LocationReporter
    options: GeolocationOptions = GEOLOCATION_OPTIONS

    async def request_location(
        self,
        provider: GeolocationProvider,
        confirm: LocationConfirmer | None = None,
    ) -> LocationOutcome:
        """Resolve the current position into a named location."""
        try:
            coordinates = await provider.current_position(self.options)
        except GeolocationError as exc:
            _logger.warning("Geolocation failed", extra={"kind": exc.kind.value})
            return LocationOutcome(location=None, message=GEOLOCATION_MESSAGES[exc.kind])

        report_status, resolved_name = await asyncio.gather(
            self._report(coordinates), self._resolve_name(coordinates, confirm)
        )
        location = LocationInfo(coordinates=coordinates, resolved_name=resolved_name)
        self.session.location = location
        return LocationOutcome(
            location=location,
            message=f"Location set to: {resolved_name}",
            report_status=report_status,
        )

    async def _report(self, coordinates: Coordinates) -> str:
        try:
            await self.reporter.report(coordinates.latitude, coordinates.longitude)
        except Exception:
            _logger.exception(
                "Failed to report location",
                extra={"latitude": coordinates.latitude},
            )
            return REPORT_FAILED
        return REPORT_SENT

    async def _resolve_name(
        self, coordinates: Coordinates, confirm: LocationConfirmer | None
    ) -> str:
        try:
            resolved = await self._reverse_geocode(coordinates)
        except ReverseGeocodeFailed as exc:
            _logger.warning("Reverse geocoding failed: %s", exc.message)
            return coordinates.as_text()
        if confirm is None:
            return resolved
        answer = await confirm(resolved)
        if answer and answer.strip():
            return answer.strip()
        return resolved

    async def _reverse_geocode(self, coordinates: Coordinates) -> str:
        try:
            payload = await self.geocoder.reverse(
                coordinates.latitude, coordinates.longitude
            )
        except Exception as exc:
            raise ReverseGeocodeFailed("Reverse geocoding request failed") from exc
        display_name = payload.get("display_name")
        if not isinstance(display_name, str) or not display_name.strip():
            raise ReverseGeocodeFailed("Reverse geocoding returned no place name")
        return display_name
