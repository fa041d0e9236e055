"""Playlist collection from the music service."""

import logging
from dataclasses import dataclass
from typing import Protocol

from diary_story.domain.context import TrackRef
from diary_story.domain.errors import PlaylistFetchFailed
from diary_story.services.session import DiarySession

_logger = logging.getLogger(__name__)

PLAYLIST_PAGE_SIZE = 10
NO_TRACKS_MESSAGE = "No songs found in playlist."


class PlaylistSource(Protocol):
    """Interface for reading tracks from an authorized playlist."""

    async def fetch_tracks(self, limit: int) -> list[TrackRef]:
        """Return up to ``limit`` tracks in playlist order."""


@dataclass(frozen=True)
class PlaylistOutcome:
    """Result of one playlist fetch."""

    tracks: tuple[TrackRef, ...]
    message: str

    @property
    def empty(self) -> bool:
        return not self.tracks


@dataclass
class PlaylistFetcher:
    """Fetch the playlist and replace the session tracks."""

    session: DiarySession
    source: PlaylistSource
    page_size: int = PLAYLIST_PAGE_SIZE

    async def fetch(self) -> PlaylistOutcome:
        """Fetch tracks once; raises ``PlaylistFetchFailed`` on any failure."""
        try:
            tracks = await self.source.fetch_tracks(self.page_size)
        except PlaylistFetchFailed:
            _logger.exception("Playlist fetch failed")
            raise
        except Exception as exc:
            _logger.exception("Playlist fetch failed")
            raise PlaylistFetchFailed() from exc

        fetched = tuple(tracks[: self.page_size])
        self.session.tracks = fetched
        if not fetched:
            return PlaylistOutcome(tracks=(), message=NO_TRACKS_MESSAGE)
        return PlaylistOutcome(
            tracks=fetched,
            message=f"Fetched {len(fetched)} songs from your playlist",
        )
