"""Session state and the context aggregator."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from diary_story.domain.context import (
    Context,
    LocationInfo,
    PhotoRecord,
    SavedStory,
    StoryResult,
    TrackRef,
)
from diary_story.domain.errors import EmptyContext


@dataclass
class DiarySession:
    """In-memory state for one user interaction sequence.

    Each field has a single owner: ``location`` is written by the location
    resolver, ``tracks`` by the playlist fetcher, ``photos`` by the photo
    ingestor, and ``last_result``/``saved_stories`` by the story presenter.
    Owners replace their field in one assignment once their operation settles.
    """

    location: LocationInfo | None = None
    tracks: tuple[TrackRef, ...] = ()
    photos: tuple[PhotoRecord, ...] = ()
    last_result: StoryResult | None = None
    saved_stories: list[SavedStory] = field(default_factory=list)


@dataclass
class ContextAggregator:
    """Build immutable context snapshots from the session."""

    session: DiarySession
    today: Callable[[], date] = date.today

    def snapshot(self, freeform_idea: str | None = None) -> Context:
        """Return the current context or raise ``EmptyContext``."""
        idea = (freeform_idea or "").strip() or None
        context = Context(
            location=self.session.location,
            tracks=tuple(self.session.tracks),
            photos=tuple(self.session.photos),
            freeform_idea=idea,
            diary_date=self.today(),
        )
        if context.is_empty():
            raise EmptyContext()
        return context
