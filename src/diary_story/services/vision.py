"""Image description for uploaded photos."""

import base64
from dataclasses import dataclass, field
from typing import Protocol

from diary_story.domain.errors import DescribeFailed

TAGS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "tags": {
            "type": "array",
            "items": {"type": "string"},
        }
    },
    "required": ["tags"],
    "additionalProperties": False,
}

DESCRIBE_PROMPT = (
    "Describe what this photo shows as three to five short tags, "
    "each a few words long, most prominent first."
)

STUB_TAGS = ("a sunny beach", "palm trees", "blue sky")


class ImageDescriptor(Protocol):
    """Interface for turning an encoded image into descriptive tags."""

    async def describe(self, image_data_url: str) -> list[str]:
        """Return short tags describing the image."""


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(
        self,
        *,
        model: str,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured vision extraction data."""


@dataclass
class StubImageDescriptor(ImageDescriptor):
    """Descriptor that returns the same tags for every image."""

    tags: tuple[str, ...] = field(default=STUB_TAGS)

    async def describe(self, image_data_url: str) -> list[str]:
        return list(self.tags)


@dataclass
class VisionImageDescriptor(ImageDescriptor):
    """Descriptor backed by an LLM vision client."""

    client: VisionClient
    model: str
    max_tags: int = 5

    async def describe(self, image_data_url: str) -> list[str]:
        """Ask the vision model for tags and validate the payload."""
        raw = await self.client.extract(
            model=self.model,
            image_data_url=image_data_url,
            schema=TAGS_SCHEMA,
            prompt=DESCRIBE_PROMPT,
        )
        tags = raw.get("tags")
        if not isinstance(tags, list):
            raise DescribeFailed("Vision response did not include tags")
        cleaned = [str(tag).strip() for tag in tags if str(tag).strip()]
        return cleaned[: self.max_tags]


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
