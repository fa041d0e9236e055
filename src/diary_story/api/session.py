"""Session endpoints: one route per user action."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from diary_story.api.errors import error_response, format_error
from diary_story.api.models import DevicePosition, PhotoUploadRequest, StoryRequest
from diary_story.domain.context import Coordinates
from diary_story.domain.errors import (
    EmptyContext,
    GenerationInProgress,
    GeolocationError,
    NothingToSave,
    PlaylistFetchFailed,
)
from diary_story.services.location import GEOLOCATION_MESSAGES, GeolocationOptions

if TYPE_CHECKING:
    from diary_story.containers import AppContainer
    from diary_story.services.session import DiarySession

router = APIRouter(prefix="/session", tags=["session"])
_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportedPosition:
    """Geolocation provider replaying the position reported by the device."""

    position: DevicePosition

    async def current_position(self, options: GeolocationOptions) -> Coordinates:
        if self.position.error is not None:
            raise GeolocationError(
                self.position.error, GEOLOCATION_MESSAGES[self.position.error]
            )
        return Coordinates(
            latitude=float(self.position.latitude),
            longitude=float(self.position.longitude),
        )


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/location/options")
async def location_options(request: Request) -> dict:
    """Return the options the device should pass to its geolocation call."""
    options = _container(request).diary_service.location_resolver.options
    return {
        "high_accuracy": options.high_accuracy,
        "timeout_ms": options.timeout_ms,
        "max_cached_age_ms": options.max_cached_age_ms,
    }


@router.post("/location")
async def request_location(position: DevicePosition, request: Request) -> JSONResponse:
    """Resolve the reported device position into the session location."""

    async def confirm(resolved_name: str) -> str | None:
        return position.confirmed_name

    outcome = await _container(request).diary_service.request_location(
        ReportedPosition(position), confirm
    )
    if outcome.location is None:
        return error_response(422, outcome.message)
    return JSONResponse(
        content={
            "location": outcome.location.resolved_name,
            "message": outcome.message,
            "report_status": outcome.report_status,
        }
    )


@router.post("/playlist")
async def fetch_playlist(request: Request) -> JSONResponse:
    """Replace the session tracks with the current playlist."""
    container = _container(request)
    try:
        outcome = await container.diary_service.fetch_playlist()
    except PlaylistFetchFailed as exc:
        return error_response(502, format_error(container, exc, exc.message))
    return JSONResponse(
        content={
            "tracks": [track.render() for track in outcome.tracks],
            "message": outcome.message,
        }
    )


@router.post("/photos")
async def upload_photos(payload: PhotoUploadRequest, request: Request) -> dict:
    """Ingest a batch of photos, replacing the previous batch."""
    outcome = await _container(request).diary_service.upload_photos(payload.files)
    return {
        "photos": [
            {"name": photo.file_name, "tags": list(photo.tags)}
            for photo in outcome.photos
        ],
        "failed": list(outcome.failed),
        "superseded": outcome.superseded,
        "message": outcome.message,
    }


@router.post("/story")
async def generate_story(payload: StoryRequest, request: Request) -> JSONResponse:
    """Generate a story from the current session context."""
    try:
        generated = await _container(request).diary_service.generate_story(
            payload.idea
        )
    except EmptyContext as exc:
        return error_response(400, exc.message)
    except GenerationInProgress as exc:
        return error_response(409, exc.message)
    view = generated.view
    if view.error is not None:
        return error_response(502, view.error)
    return JSONResponse(
        content={
            "title": "Your Story",
            "paragraphs": list(view.paragraphs),
            "can_save": view.can_save,
        }
    )


@router.post("/story/save")
async def save_story(request: Request) -> JSONResponse:
    """Save the current story at the top of the session list."""
    try:
        story = _container(request).diary_service.save_story()
    except NothingToSave as exc:
        return error_response(409, exc.message)
    _logger.info("Story saved at %s", story.timestamp)
    return JSONResponse(
        content={
            "timestamp": story.timestamp,
            "text": story.text,
            "message": "Story saved!",
        }
    )


@router.get("/stories")
async def saved_stories(request: Request) -> dict:
    """Return saved stories, newest first."""
    stories = _container(request).diary_service.saved_stories()
    return {
        "stories": [{"timestamp": story.timestamp, "text": story.text} for story in stories]
    }


@router.get("/context")
async def current_context(request: Request) -> dict:
    """Return what each collector has published so far."""
    session: DiarySession = _container(request).diary_service.session
    return {
        "location": session.location.resolved_name if session.location else None,
        "tracks": [track.render() for track in session.tracks],
        "photos": [
            {"name": photo.file_name, "tags": list(photo.tags)}
            for photo in session.photos
        ],
        "saved_stories": len(session.saved_stories),
    }
