"""User-facing error formatting for API responses."""

from fastapi.responses import JSONResponse

from diary_story.containers import AppContainer


def format_error(state_container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def error_response(status_code: int, message: str) -> JSONResponse:
    """Return the ``{"error": ...}`` body used by every endpoint."""
    return JSONResponse(status_code=status_code, content={"error": message})
