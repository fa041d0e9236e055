"""User-facing actions over a single diary session."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from diary_story.domain.context import Context, SavedStory
from diary_story.domain.errors import GenerationInProgress
from diary_story.services.location import (
    GeolocationProvider,
    LocationConfirmer,
    LocationOutcome,
    LocationResolver,
)
from diary_story.services.photos import PhotoBatchOutcome, PhotoFile, PhotoIngestor
from diary_story.services.playlist import PlaylistFetcher, PlaylistOutcome
from diary_story.services.prompts import compile_prompt
from diary_story.services.session import ContextAggregator, DiarySession
from diary_story.services.stories import (
    StoryGenerationClient,
    StoryPresenter,
    StoryView,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedStory:
    """A rendered story together with the context and prompt it came from."""

    context: Context
    prompt: str
    view: StoryView


@dataclass
class DiaryService:
    """Trigger one pipeline stage per user action.

    The three collectors run independently; generation reads whatever they
    have published at the time of the call. A generate call made while another
    is still awaiting the backend raises ``GenerationInProgress``.
    """

    session: DiarySession
    location_resolver: LocationResolver
    playlist_fetcher: PlaylistFetcher
    photo_ingestor: PhotoIngestor
    aggregator: ContextAggregator
    generation_client: StoryGenerationClient
    presenter: StoryPresenter
    _generating: bool = field(default=False, init=False, repr=False)

    async def request_location(
        self,
        provider: GeolocationProvider,
        confirm: LocationConfirmer | None = None,
    ) -> LocationOutcome:
        return await self.location_resolver.request_location(provider, confirm)

    async def fetch_playlist(self) -> PlaylistOutcome:
        return await self.playlist_fetcher.fetch()

    async def upload_photos(self, files: Sequence[PhotoFile]) -> PhotoBatchOutcome:
        return await self.photo_ingestor.ingest(files)

    async def generate_story(self, idea: str | None = None) -> GeneratedStory:
        """Snapshot the session, compile the prompt and generate a story."""
        if self._generating:
            raise GenerationInProgress()
        context = self.aggregator.snapshot(idea)
        prompt = compile_prompt(context)
        self._generating = True
        try:
            result = await self.generation_client.generate(prompt)
        finally:
            self._generating = False
        _logger.info(
            "Story generated: ok=%s tracks=%s photos=%s idea=%s",
            result.ok,
            len(context.tracks),
            len(context.photos),
            context.freeform_idea is not None,
        )
        return GeneratedStory(
            context=context, prompt=prompt, view=self.presenter.present(result)
        )

    def save_story(self) -> SavedStory:
        return self.presenter.save()

    def saved_stories(self) -> list[SavedStory]:
        return list(self.session.saved_stories)
