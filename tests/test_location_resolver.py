"""Tests for the location resolver."""

import asyncio

import httpx
import pytest

from diary_story.domain.context import Coordinates, LocationInfo
from diary_story.domain.errors import GeolocationErrorKind
from diary_story.services.location import (
    GEOLOCATION_MESSAGES,
    REPORT_FAILED,
    REPORT_SENT,
    LocationResolver,
)
from diary_story.services.session import DiarySession
from tests.conftest import FakeGeocoder, FakeGeolocation, FakeLocationReporter


def _resolver(
    session: DiarySession,
    geocoder: FakeGeocoder | None = None,
    reporter: FakeLocationReporter | None = None,
) -> LocationResolver:
    return LocationResolver(
        session=session,
        geocoder=geocoder or FakeGeocoder(),
        reporter=reporter or FakeLocationReporter(),
    )


def test_request_location_uses_resolved_name_and_reports() -> None:
    session = DiarySession()
    reporter = FakeLocationReporter()
    provider = FakeGeolocation()

    outcome = asyncio.run(_resolver(session, reporter=reporter).request_location(provider))

    assert outcome.location is not None
    assert outcome.location.resolved_name == "Santa Monica Pier, California"
    assert outcome.message == "Location set to: Santa Monica Pier, California"
    assert outcome.report_status == REPORT_SENT
    assert reporter.reports == [(34.0094, -118.4973)]
    assert session.location == outcome.location
    options = provider.options[0]
    assert options.high_accuracy is True
    assert options.timeout_ms == 10000
    assert options.max_cached_age_ms == 0


def test_request_location_accepts_user_override() -> None:
    session = DiarySession()

    async def confirm(resolved_name: str) -> str | None:
        assert resolved_name == "Santa Monica Pier, California"
        return "  Grandma's porch  "

    outcome = asyncio.run(
        _resolver(session).request_location(FakeGeolocation(), confirm)
    )

    assert session.location is not None
    assert session.location.resolved_name == "Grandma's porch"
    assert outcome.message == "Location set to: Grandma's porch"


@pytest.mark.parametrize("answer", [None, "", "   "])
def test_request_location_blank_confirmation_keeps_resolved_name(answer) -> None:
    session = DiarySession()

    async def confirm(resolved_name: str) -> str | None:
        return answer

    asyncio.run(_resolver(session).request_location(FakeGeolocation(), confirm))

    assert session.location is not None
    assert session.location.resolved_name == "Santa Monica Pier, California"


@pytest.mark.parametrize(
    "geocoder",
    [
        FakeGeocoder(error=httpx.ConnectError("offline")),
        FakeGeocoder(payload={"error": "Unable to geocode"}),
    ],
)
def test_request_location_falls_back_to_coordinates(geocoder: FakeGeocoder) -> None:
    session = DiarySession()
    provider = FakeGeolocation(coordinates=Coordinates(latitude=1.5, longitude=-2.25))

    asyncio.run(_resolver(session, geocoder=geocoder).request_location(provider))

    assert session.location == LocationInfo(
        coordinates=Coordinates(latitude=1.5, longitude=-2.25),
        resolved_name="1.5, -2.25",
    )


def test_report_failure_only_changes_status() -> None:
    session = DiarySession()
    reporter = FakeLocationReporter(error=httpx.ConnectError("sink down"))

    outcome = asyncio.run(
        _resolver(session, reporter=reporter).request_location(FakeGeolocation())
    )

    assert outcome.report_status == REPORT_FAILED
    assert session.location is not None
    assert session.location.resolved_name == "Santa Monica Pier, California"


@pytest.mark.parametrize("kind", list(GeolocationErrorKind))
def test_geolocation_failure_surfaces_message(kind: GeolocationErrorKind) -> None:
    previous = LocationInfo(
        coordinates=Coordinates(latitude=0.0, longitude=0.0), resolved_name="Before"
    )
    session = DiarySession(location=previous)
    reporter = FakeLocationReporter()

    outcome = asyncio.run(
        _resolver(session, reporter=reporter).request_location(
            FakeGeolocation(error=kind)
        )
    )

    assert outcome.location is None
    assert outcome.message == GEOLOCATION_MESSAGES[kind]
    assert outcome.report_status is None
    assert reporter.reports == []
    assert session.location == previous


@pytest.mark.parametrize(
    ("latitude", "longitude", "expected"),
    [
        (1.0, 2.0, "1, 2"),
        (0.00001, -0.0, "0.00001, 0"),
        (34.0094, -118.4973, "34.0094, -118.4973"),
    ],
)
def test_coordinates_text_matches_plain_number_rendering(
    latitude: float, longitude: float, expected: str
) -> None:
    assert Coordinates(latitude=latitude, longitude=longitude).as_text() == expected
