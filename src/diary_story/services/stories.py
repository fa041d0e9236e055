"""Story generation and presentation."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from diary_story.domain.context import SavedStory, StoryResult
from diary_story.domain.errors import NothingToSave, StoryErrorKind
from diary_story.services.session import DiarySession

_logger = logging.getLogger(__name__)

MAX_OUTPUT_TOKENS = 400
TEMPERATURE = 0.8

REQUEST_FAILED_MESSAGE = "Failed to generate story"
NO_CANDIDATE_MESSAGE = "No story generated"


class StoryBackend(Protocol):
    """Interface for the generative text backend."""

    async def complete(
        self, *, model: str, prompt: str, max_tokens: int, temperature: float
    ) -> list[str]:
        """Return the text of every candidate the backend produced."""


@dataclass
class StoryGenerationClient:
    """Send a compiled prompt to the backend exactly once."""

    backend: StoryBackend
    model: str

    async def generate(self, prompt: str) -> StoryResult:
        """Return the first candidate or a typed failure."""
        try:
            candidates = await self.backend.complete(
                model=self.model,
                prompt=prompt,
                max_tokens=MAX_OUTPUT_TOKENS,
                temperature=TEMPERATURE,
            )
        except Exception:
            _logger.exception("Story generation request failed")
            return StoryResult.failure(
                StoryErrorKind.REQUEST_FAILED, REQUEST_FAILED_MESSAGE
            )
        if not candidates:
            _logger.error("Story backend returned no candidates")
            return StoryResult.failure(StoryErrorKind.NO_CANDIDATE, NO_CANDIDATE_MESSAGE)
        return StoryResult.success(candidates[0])


@dataclass(frozen=True)
class StoryView:
    """Renderable form of a story result."""

    paragraphs: tuple[str, ...]
    error: str | None
    can_save: bool


@dataclass
class StoryPresenter:
    """Show generated stories and keep the session's saved list."""

    session: DiarySession
    clock: Callable[[], datetime] = datetime.now

    def present(self, result: StoryResult) -> StoryView:
        """Render a result and remember it as the current story."""
        self.session.last_result = result
        if result.text is not None:
            return StoryView(
                paragraphs=tuple(result.text.splitlines()), error=None, can_save=True
            )
        message = result.error_message or "Story could not be generated."
        return StoryView(paragraphs=(), error=f"Error: {message}", can_save=False)

    def save(self) -> SavedStory:
        """Stamp the current story and put it first in the saved list."""
        result = self.session.last_result
        if result is None or result.text is None:
            raise NothingToSave()
        story = SavedStory(timestamp=format_timestamp(self.clock()), text=result.text)
        self.session.saved_stories.insert(0, story)
        return story


def format_timestamp(moment: datetime) -> str:
    """Format like ``19/10/2026, 01:05:09 PM``."""
    hour = moment.hour % 12 or 12
    meridiem = "PM" if moment.hour >= 12 else "AM"
    return (
        f"{moment.day}/{moment.month}/{moment.year}, "
        f"{hour:02d}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )
