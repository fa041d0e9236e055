"""Domain models for the diary context and generated stories."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from diary_story.domain.errors import StoryErrorKind


@dataclass(frozen=True)
class Coordinates:
    """Raw device position."""

    latitude: float
    longitude: float

    def as_text(self) -> str:
        """Render coordinates as a fallback place name, e.g. ``1, 0.00001``."""
        return f"{_plain_number(self.latitude)}, {_plain_number(self.longitude)}"


def _plain_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


@dataclass(frozen=True)
class LocationInfo:
    """Resolved location for the current session."""

    coordinates: Coordinates
    resolved_name: str


@dataclass(frozen=True)
class TrackRef:
    """Single track from the playlist."""

    title: str
    artist: str

    def render(self) -> str:
        return f"{self.title} by {self.artist}"


@dataclass(frozen=True)
class PhotoRecord:
    """Uploaded photo with its descriptive tags."""

    file_name: str
    encoded_image: str
    tags: tuple[str, ...] = ()

    @property
    def description(self) -> str:
        return ", ".join(self.tags)


@dataclass(frozen=True)
class Context:
    """Immutable snapshot of every input source at generation time."""

    location: LocationInfo | None
    tracks: tuple[TrackRef, ...]
    photos: tuple[PhotoRecord, ...]
    freeform_idea: str | None
    diary_date: date

    def is_empty(self) -> bool:
        """Return true when no source contributed anything."""
        return (
            self.location is None
            and not self.tracks
            and not self.photos
            and not (self.freeform_idea or "").strip()
        )


@dataclass(frozen=True)
class StoryResult:
    """Outcome of a single generation request."""

    text: str | None = None
    error_kind: StoryErrorKind | None = None
    error_message: str | None = None

    @classmethod
    def success(cls, text: str) -> "StoryResult":
        return cls(text=text)

    @classmethod
    def failure(cls, kind: StoryErrorKind, message: str) -> "StoryResult":
        return cls(error_kind=kind, error_message=message)

    @property
    def ok(self) -> bool:
        return self.text is not None


@dataclass(frozen=True)
class SavedStory:
    """Story stamped by the user's save action."""

    timestamp: str
    text: str
