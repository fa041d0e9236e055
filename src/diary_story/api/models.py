"""Pydantic models for API payloads."""

import base64
import binascii

from pydantic import BaseModel, Field, model_validator

from diary_story.domain.errors import GeolocationErrorKind


class LocationReport(BaseModel):
    """Coordinates forwarded to the reporting sink."""

    latitude: float
    longitude: float


class PhotoSummary(BaseModel):
    """Photo details sent alongside a compiled prompt."""

    name: str
    description: str = ""


class GenerateStoryRequest(BaseModel):
    """Generation request carrying a compiled prompt and its context."""

    location: str | None = None
    playlist: list[str] = Field(default_factory=list)
    photos: list[PhotoSummary] = Field(default_factory=list)
    prompt: str | None = None


class DevicePosition(BaseModel):
    """Result of the device geolocation call, plus the user's confirmation."""

    latitude: float | None = None
    longitude: float | None = None
    error: GeolocationErrorKind | None = None
    confirmed_name: str | None = None

    @model_validator(mode="after")
    def _check_position(self) -> "DevicePosition":
        if self.error is None and (self.latitude is None or self.longitude is None):
            raise ValueError("latitude and longitude are required without an error")
        return self


class UploadedPhoto(BaseModel):
    """Photo file sent as base64 text or a data URL."""

    name: str
    content_base64: str

    @property
    def filename(self) -> str:
        return self.name

    async def read(self) -> bytes:
        """Decode the file content."""
        payload = self.content_base64
        if payload.startswith("data:"):
            payload = payload.split(",", maxsplit=1)[-1]
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"{self.name} is not valid base64") from exc


class PhotoUploadRequest(BaseModel):
    """Batch of photos to ingest."""

    files: list[UploadedPhoto] = Field(default_factory=list)


class StoryRequest(BaseModel):
    """Generate trigger with the optional free-form idea."""

    idea: str | None = None
