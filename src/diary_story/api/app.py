"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from diary_story.api.errors import error_response, format_error
from diary_story.api.models import GenerateStoryRequest, LocationReport
from diary_story.api.session import router as session_router
from diary_story.app_logging import configure_logging
from diary_story.containers import AppContainer
from diary_story.domain.errors import EmptyContext
from diary_story.services.playlist import PLAYLIST_PAGE_SIZE
from diary_story.services.prompts import render_diary_entry


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Spotify authorize URL: %s/auth/spotify", container.settings.base_url
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(session_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/location")
    async def location(report: LocationReport, request: Request) -> dict[str, str]:
        """Receive coordinates from the client."""
        state_container: AppContainer = request.app.state.container
        status = await state_container.location_sink.report(
            report.latitude, report.longitude
        )
        return {"status": status}

    @app.get("/spotify-playlist")
    async def spotify_playlist(request: Request) -> JSONResponse:
        """Return the first page of the configured playlist."""
        state_container: AppContainer = request.app.state.container
        try:
            tracks = await state_container.spotify_client.fetch_tracks(
                PLAYLIST_PAGE_SIZE
            )
        except Exception as exc:
            logger.exception("Spotify playlist fetch failed")
            return error_response(
                500,
                format_error(state_container, exc, "Failed to fetch Spotify playlist"),
            )
        return JSONResponse(
            content={
                "tracks": [
                    {"name": track.title, "artist": track.artist} for track in tracks
                ]
            }
        )

    @app.post("/generate-story")
    async def generate_story(
        payload: GenerateStoryRequest, request: Request
    ) -> JSONResponse:
        """Generate a story from a compiled prompt or from the sent context."""
        state_container: AppContainer = request.app.state.container
        prompt = (payload.prompt or "").strip()
        if not prompt:
            location = (payload.location or "").strip() or None
            if not (location or payload.playlist or payload.photos):
                return error_response(400, EmptyContext().message)
            prompt = render_diary_entry(
                diary_date=state_container.diary_service.aggregator.today(),
                location=location,
                songs=payload.playlist,
                photos=[(photo.name, photo.description) for photo in payload.photos],
            )
        logger.info(
            "Generating story: location=%s songs=%s photos=%s",
            payload.location or "-",
            len(payload.playlist),
            len(payload.photos),
        )
        result = await state_container.generation_client.generate(prompt)
        if result.text is None:
            return error_response(500, result.error_message or "No story generated")
        return JSONResponse(content={"story": result.text})

    @app.get("/auth/spotify")
    async def spotify_login(request: Request) -> RedirectResponse:
        """Redirect to the Spotify authorization page."""
        state_container: AppContainer = request.app.state.container
        return RedirectResponse(state_container.spotify_client.authorize_url())

    @app.get("/auth/spotify/callback", response_model=None)
    async def spotify_callback(
        request: Request, code: str | None = None
    ) -> PlainTextResponse | JSONResponse:
        """Exchange the authorization code and log the refresh token."""
        state_container: AppContainer = request.app.state.container
        if not code:
            return PlainTextResponse("No code provided", status_code=400)
        try:
            tokens = await state_container.spotify_client.exchange_code(code)
        except Exception as exc:
            logger.exception("Spotify token exchange failed")
            return error_response(
                500, format_error(state_container, exc, "Failed to get Spotify tokens")
            )
        refresh_token = tokens.get("refresh_token")
        if refresh_token:
            logger.info("Your Spotify Refresh Token: %s", refresh_token)
        return PlainTextResponse(
            "Spotify authorization successful! Check console for refresh token."
        )

    return app

