"""Tests for the diary service actions."""

import asyncio
from dataclasses import dataclass, field

import pytest

from diary_story.domain.context import PhotoRecord
from diary_story.domain.errors import EmptyContext, GenerationInProgress
from diary_story.services.stories import StoryBackend
from tests.conftest import FakeGeolocation, FakePhotoFile, FakeStoryBackend


@dataclass
class BlockingStoryBackend(StoryBackend):
    """Backend that waits until released."""

    release: asyncio.Event = field(default_factory=asyncio.Event)
    started: asyncio.Event = field(default_factory=asyncio.Event)

    async def complete(
        self, *, model: str, prompt: str, max_tokens: int, temperature: float
    ) -> list[str]:
        self.started.set()
        await self.release.wait()
        return ["done"]


def test_generate_story_from_collected_sources(
    container, story_backend: FakeStoryBackend
) -> None:
    service = container.diary_service

    async def scenario():  # type: ignore[no-untyped-def]
        await service.fetch_playlist()
        await service.upload_photos([FakePhotoFile("beach.jpg")])
        return await service.generate_story()

    generated = asyncio.run(scenario())

    assert generated.context.location is None
    assert generated.context.photos[0] == PhotoRecord(
        file_name="beach.jpg",
        encoded_image=generated.context.photos[0].encoded_image,
        tags=("a sunny beach",),
    )
    assert story_backend.prompts == [generated.prompt]
    assert "Location: unknown location" in generated.prompt
    assert "Song A by Artist X, Song B by Artist Y, Artist Z" in generated.prompt
    assert 'Photo 1 named "beach.jpg" showing: a sunny beach' in generated.prompt
    assert "Diary Entry: October 19, 2026" in generated.prompt
    assert generated.view.paragraphs == ("Dear diary 🌴", "Today the sun won.")


def test_generate_story_with_location(container, story_backend) -> None:
    service = container.diary_service

    async def scenario():  # type: ignore[no-untyped-def]
        await service.request_location(FakeGeolocation())
        return await service.generate_story()

    generated = asyncio.run(scenario())

    assert "Location: Santa Monica Pier, California" in generated.prompt
    assert "Spotify Playlist songs: no songs" in generated.prompt
    assert "No photo uploaded." in generated.prompt


def test_generate_story_rejects_empty_context_before_network(
    container, story_backend: FakeStoryBackend
) -> None:
    with pytest.raises(EmptyContext):
        asyncio.run(container.diary_service.generate_story("  "))

    assert story_backend.prompts == []


def test_generate_story_rejects_overlapping_requests(container) -> None:
    service = container.diary_service

    async def scenario():  # type: ignore[no-untyped-def]
        backend = BlockingStoryBackend()
        service.generation_client.backend = backend
        first = asyncio.create_task(service.generate_story("first idea"))
        await backend.started.wait()
        with pytest.raises(GenerationInProgress):
            await service.generate_story("second idea")
        backend.release.set()
        generated = await first
        again = await service.generate_story("third idea")
        return generated, again

    generated, again = asyncio.run(scenario())

    assert generated.view.paragraphs == ("done",)
    assert again.view.paragraphs == ("done",)


def test_save_story_after_generation(container) -> None:
    service = container.diary_service

    asyncio.run(service.generate_story("a day at the zoo"))
    saved = service.save_story()

    assert service.saved_stories() == [saved]
    assert saved.text == "Dear diary 🌴\nToday the sun won."
