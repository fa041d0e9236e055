"""ASGI entrypoint for the diary story API."""

from diary_story.api.app import create_app
from diary_story.containers import build_container

app = create_app(build_container())
