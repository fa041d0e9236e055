"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from diary_story.adapters.location_reporter import (
    HttpxLocationReporter,
    LoggingLocationReporter,
)
from diary_story.adapters.nominatim_client import HttpxNominatimClient
from diary_story.adapters.openai_story_client import OpenAIStoryBackend
from diary_story.adapters.openai_vision_client import OpenAIVisionClient
from diary_story.adapters.spotify_client import HttpxSpotifyClient, SpotifyClient
from diary_story.config import Settings, parse_playlist_id
from diary_story.services.diary import DiaryService
from diary_story.services.location import (
    LocationReporter,
    LocationResolver,
    ReverseGeocoder,
)
from diary_story.services.photos import PhotoIngestor
from diary_story.services.playlist import PlaylistFetcher
from diary_story.services.session import ContextAggregator, DiarySession
from diary_story.services.stories import StoryGenerationClient, StoryPresenter
from diary_story.services.vision import (
    ImageDescriptor,
    StubImageDescriptor,
    VisionImageDescriptor,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    spotify_client: SpotifyClient
    location_sink: LocationReporter
    generation_client: StoryGenerationClient
    diary_service: DiaryService
    close_resources: Callable[[], Awaitable[None]]


def build_diary_service(  # noqa: PLR0913
    *,
    session: DiarySession,
    spotify_client: SpotifyClient,
    geocoder: ReverseGeocoder,
    reporter: LocationReporter,
    descriptor: ImageDescriptor,
    generation_client: StoryGenerationClient,
) -> DiaryService:
    """Wire the collectors, aggregator and presenter around one session."""
    return DiaryService(
        session=session,
        location_resolver=LocationResolver(
            session=session, geocoder=geocoder, reporter=reporter
        ),
        playlist_fetcher=PlaylistFetcher(session=session, source=spotify_client),
        photo_ingestor=PhotoIngestor(session=session, descriptor=descriptor),
        aggregator=ContextAggregator(session=session),
        generation_client=generation_client,
        presenter=StoryPresenter(session=session),
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    spotify_client = HttpxSpotifyClient.create(
        client_id=resolved_settings.spotify_client_id,
        client_secret=resolved_settings.spotify_client_secret,
        refresh_token=resolved_settings.spotify_refresh_token,
        playlist_id=parse_playlist_id(resolved_settings.spotify_playlist_id),
        redirect_uri=resolved_settings.spotify_redirect_uri,
    )
    geocoder = HttpxNominatimClient.create(
        base_url=resolved_settings.nominatim_base_url,
        user_agent=resolved_settings.nominatim_user_agent,
    )
    location_sink = LoggingLocationReporter()
    remote_reporter: HttpxLocationReporter | None = None
    if resolved_settings.location_sink_url:
        remote_reporter = HttpxLocationReporter.create(
            resolved_settings.location_sink_url
        )
    story_backend = OpenAIStoryBackend.create(resolved_settings.openai_api_key)
    generation_client = StoryGenerationClient(
        backend=story_backend, model=resolved_settings.openai_model
    )
    descriptor: ImageDescriptor = StubImageDescriptor()
    if resolved_settings.image_descriptor == "openai":
        descriptor = VisionImageDescriptor(
            client=OpenAIVisionClient.create(resolved_settings.openai_api_key),
            model=resolved_settings.openai_vision_model,
        )
    diary_service = build_diary_service(
        session=DiarySession(),
        spotify_client=spotify_client,
        geocoder=geocoder,
        reporter=remote_reporter or location_sink,
        descriptor=descriptor,
        generation_client=generation_client,
    )

    async def close_resources() -> None:
        await spotify_client.close()
        await geocoder.close()
        if remote_reporter is not None:
            await remote_reporter.close()

    return AppContainer(
        settings=resolved_settings,
        spotify_client=spotify_client,
        location_sink=location_sink,
        generation_client=generation_client,
        diary_service=diary_service,
        close_resources=close_resources,
    )
