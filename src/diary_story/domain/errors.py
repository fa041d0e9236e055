"""Error taxonomy for the story pipeline."""

from enum import Enum


class GeolocationErrorKind(Enum):
    """Failure conditions reported by the geolocation capability."""

    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class StoryErrorKind(Enum):
    """Failure conditions of a generation request."""

    REQUEST_FAILED = "request_failed"
    NO_CANDIDATE = "no_candidate"


class DiaryStoryError(Exception):
    """Base exception for pipeline errors.

    The message is always safe to show to the user.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GeolocationError(DiaryStoryError):
    """The device could not provide a position."""

    def __init__(self, kind: GeolocationErrorKind, message: str | None = None) -> None:
        super().__init__(message or kind.value)
        self.kind = kind


class ReverseGeocodeFailed(DiaryStoryError):
    """Coordinates could not be turned into a place name."""


class PlaylistFetchFailed(DiaryStoryError):
    """The playlist could not be fetched or parsed."""

    def __init__(self, message: str = "Error fetching playlist.") -> None:
        super().__init__(message)


class DecodeFailed(DiaryStoryError):
    """An uploaded photo could not be read or encoded."""


class DescribeFailed(DiaryStoryError):
    """The image descriptor failed for a photo."""


class EmptyContext(DiaryStoryError):
    """Generation was requested without any input source."""

    def __init__(
        self,
        message: str = "Please provide location, playlist, photo, or write a story idea.",
    ) -> None:
        super().__init__(message)


class StoryGenerationError(DiaryStoryError):
    """The generative backend did not produce a story."""

    def __init__(self, kind: StoryErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class GenerationInProgress(DiaryStoryError):
    """A generation request is already in flight for the session."""

    def __init__(
        self, message: str = "A story is already being generated. Please wait."
    ) -> None:
        super().__init__(message)


class NothingToSave(DiaryStoryError):
    """Save was requested before a story was generated."""

    def __init__(self, message: str = "Generate a story before saving it.") -> None:
        super().__init__(message)
