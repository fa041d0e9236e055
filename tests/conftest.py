"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime

import pytest

from diary_story.adapters.location_reporter import LoggingLocationReporter
from diary_story.adapters.spotify_client import SpotifyClient
from diary_story.config import Settings
from diary_story.containers import AppContainer, build_diary_service
from diary_story.domain.context import Coordinates, TrackRef
from diary_story.domain.errors import GeolocationError, GeolocationErrorKind
from diary_story.services.location import (
    GeolocationOptions,
    GeolocationProvider,
    LocationReporter,
    ReverseGeocoder,
)
from diary_story.services.session import DiarySession
from diary_story.services.stories import StoryBackend, StoryGenerationClient
from diary_story.services.vision import ImageDescriptor

FIXED_DAY = date(2026, 10, 19)


@dataclass
class FakeStoryBackend(StoryBackend):
    """Fake story backend returning fixed candidates."""

    candidates: list[str] = field(
        default_factory=lambda: ["Dear diary 🌴\nToday the sun won."]
    )
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self, *, model: str, prompt: str, max_tokens: int, temperature: float
    ) -> list[str]:
        self.prompts.append(prompt)
        self.calls.append(
            {"model": model, "max_tokens": max_tokens, "temperature": temperature}
        )
        if self.error is not None:
            raise self.error
        return self.candidates


@dataclass
class FakeSpotifyClient(SpotifyClient):
    """Fake Spotify client with in-memory tracks."""

    tracks: list[TrackRef] = field(
        default_factory=lambda: [
            TrackRef(title="Song A", artist="Artist X"),
            TrackRef(title="Song B", artist="Artist Y, Artist Z"),
        ]
    )
    error: Exception | None = None
    tokens: dict[str, object] = field(
        default_factory=lambda: {"access_token": "access", "refresh_token": "refresh"}
    )
    limits: list[int] = field(default_factory=list)

    def authorize_url(self) -> str:
        return "https://accounts.spotify.com/authorize?client_id=id"

    async def exchange_code(self, code: str) -> dict[str, object]:
        if self.error is not None:
            raise self.error
        return self.tokens

    async def fetch_tracks(self, limit: int) -> list[TrackRef]:
        self.limits.append(limit)
        if self.error is not None:
            raise self.error
        return self.tracks


@dataclass
class FakeGeocoder(ReverseGeocoder):
    """Fake reverse geocoder."""

    payload: dict[str, object] = field(
        default_factory=lambda: {"display_name": "Santa Monica Pier, California"}
    )
    error: Exception | None = None

    async def reverse(self, latitude: float, longitude: float) -> dict[str, object]:
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeLocationReporter(LocationReporter):
    """Fake reporting sink that records coordinates."""

    error: Exception | None = None
    reports: list[tuple[float, float]] = field(default_factory=list)

    async def report(self, latitude: float, longitude: float) -> str:
        self.reports.append((latitude, longitude))
        if self.error is not None:
            raise self.error
        return "Location received"


@dataclass
class FakeGeolocation(GeolocationProvider):
    """Fake device geolocation capability."""

    coordinates: Coordinates = field(
        default_factory=lambda: Coordinates(latitude=34.0094, longitude=-118.4973)
    )
    error: GeolocationErrorKind | None = None
    options: list[GeolocationOptions] = field(default_factory=list)

    async def current_position(self, options: GeolocationOptions) -> Coordinates:
        self.options.append(options)
        if self.error is not None:
            raise GeolocationError(self.error)
        return self.coordinates


@dataclass
class FakeImageDescriptor(ImageDescriptor):
    """Descriptor with per-image tags, failures and optional gates."""

    tags: dict[str, list[str]] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    order: list[str] = field(default_factory=list)
    default_tags: list[str] = field(default_factory=lambda: ["a sunny beach"])

    async def describe(self, image_data_url: str) -> list[str]:
        key = image_data_url.rsplit(",", maxsplit=1)[-1]
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        self.order.append(key)
        if key in self.failing:
            raise RuntimeError("descriptor offline")
        return self.tags.get(key, self.default_tags)


@dataclass
class FakePhotoFile:
    """Uploaded file backed by static bytes."""

    filename: str
    content: bytes = b"\xff\xd8\xffimage"
    error: Exception | None = None

    async def read(self) -> bytes:
        if self.error is not None:
            raise self.error
        return self.content


class FixedClock:
    """Callable clock returning queued datetimes."""

    def __init__(self, *moments: datetime) -> None:
        self._moments = list(moments)

    def __call__(self) -> datetime:
        return self._moments.pop(0)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        spotify_client_id="spotify-id",
        spotify_client_secret="spotify-secret",
        spotify_refresh_token="refresh-token",
        spotify_playlist_id="https://open.spotify.com/playlist/abc123?si=xyz",
        environment="test",
    )


@pytest.fixture
def session() -> DiarySession:
    return DiarySession()


@pytest.fixture
def story_backend() -> FakeStoryBackend:
    return FakeStoryBackend()


@pytest.fixture
def spotify_client() -> FakeSpotifyClient:
    return FakeSpotifyClient()


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def reporter() -> FakeLocationReporter:
    return FakeLocationReporter()


@pytest.fixture
def descriptor() -> FakeImageDescriptor:
    return FakeImageDescriptor()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    session: DiarySession,
    story_backend: FakeStoryBackend,
    spotify_client: FakeSpotifyClient,
    geocoder: FakeGeocoder,
    reporter: FakeLocationReporter,
    descriptor: FakeImageDescriptor,
) -> AppContainer:
    generation_client = StoryGenerationClient(
        backend=story_backend, model=settings.openai_model
    )
    diary_service = build_diary_service(
        session=session,
        spotify_client=spotify_client,
        geocoder=geocoder,
        reporter=reporter,
        descriptor=descriptor,
        generation_client=generation_client,
    )
    diary_service.aggregator.today = lambda: FIXED_DAY

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        spotify_client=spotify_client,
        location_sink=LoggingLocationReporter(),
        generation_client=generation_client,
        diary_service=diary_service,
        close_resources=close_resources,
    )
