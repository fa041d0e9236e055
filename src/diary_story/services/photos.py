"""Photo batch ingestion with concurrent description."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from diary_story.domain.context import PhotoRecord
from diary_story.domain.errors import DecodeFailed, DescribeFailed
from diary_story.services.session import DiarySession
from diary_story.services.vision import ImageDescriptor, to_data_url

_logger = logging.getLogger(__name__)

UPLOAD_COMPLETE_MESSAGE = "Photo(s) uploaded successfully and recognition started!"
NO_FILES_MESSAGE = "No photos selected."
SUPERSEDED_MESSAGE = "A newer photo upload replaced this one."


class PhotoFile(Protocol):
    """An uploaded file that can be read asynchronously."""

    filename: str

    async def read(self) -> bytes:
        """Return the raw file content."""


@dataclass(frozen=True)
class PhotoBatchOutcome:
    """Result of ingesting one upload batch."""

    photos: tuple[PhotoRecord, ...]
    failed: tuple[str, ...]
    message: str
    superseded: bool = False


class _BatchBarrier:
    """All-of barrier over a fixed number of indexed operations."""

    def __init__(self, size: int) -> None:
        self._records: list[PhotoRecord | None] = [None] * size
        self._failed: list[bool] = [False] * size
        self._remaining = size
        self._done = asyncio.Event()
        if size == 0:
            self._done.set()

    def settle(self, index: int, record: PhotoRecord, *, failed: bool) -> None:
        """Record the outcome for ``index``; each index settles exactly once."""
        if self._records[index] is not None:
            raise RuntimeError(f"Photo {index} already settled")
        self._records[index] = record
        self._failed[index] = failed
        self._remaining -= 1
        if self._remaining == 0:
            self._done.set()

    async def wait(self) -> None:
        await self._done.wait()

    def records(self) -> tuple[PhotoRecord, ...]:
        return tuple(record for record in self._records if record is not None)

    def failed_names(self) -> tuple[str, ...]:
        return tuple(
            record.file_name
            for record, failed in zip(self._records, self._failed, strict=True)
            if record is not None and failed
        )


@dataclass
class PhotoIngestor:
    """Decode and describe a batch of photos, then replace the session photos.

    Only the most recently started batch publishes; an older batch that
    settles after a newer one has started is reported as superseded.
    """

    session: DiarySession
    descriptor: ImageDescriptor
    on_complete: Callable[[PhotoBatchOutcome], None] | None = None
    _latest_batch: int = field(default=0, init=False, repr=False)

    async def ingest(self, files: Sequence[PhotoFile]) -> PhotoBatchOutcome:
        """Ingest every file concurrently and publish the batch once all settle."""
        if not files:
            return PhotoBatchOutcome(
                photos=self.session.photos, failed=(), message=NO_FILES_MESSAGE
            )

        self._latest_batch += 1
        batch = self._latest_batch
        barrier = _BatchBarrier(len(files))
        tasks = [
            asyncio.create_task(self._ingest_one(index, file, barrier))
            for index, file in enumerate(files)
        ]
        await barrier.wait()
        await asyncio.gather(*tasks)

        records = barrier.records()
        if batch != self._latest_batch:
            _logger.info("Dropping superseded photo batch: files=%s", len(records))
            return PhotoBatchOutcome(
                photos=records,
                failed=barrier.failed_names(),
                message=SUPERSEDED_MESSAGE,
                superseded=True,
            )

        self.session.photos = records
        outcome = PhotoBatchOutcome(
            photos=records,
            failed=barrier.failed_names(),
            message=UPLOAD_COMPLETE_MESSAGE,
        )
        _logger.info(
            "Photo batch ingested: files=%s failed=%s",
            len(records),
            len(outcome.failed),
        )
        if self.on_complete is not None:
            self.on_complete(outcome)
        return outcome

    async def _ingest_one(
        self, index: int, file: PhotoFile, barrier: _BatchBarrier
    ) -> None:
        encoded = ""
        tags: tuple[str, ...] = ()
        failed = True
        try:
            encoded = await self._decode(file)
            tags = tuple(await self._describe(file, encoded))
            failed = False
        except (DecodeFailed, DescribeFailed) as exc:
            _logger.warning(
                "Photo ingestion failed: %s",
                exc.message,
                extra={"file_name": file.filename},
            )
        finally:
            barrier.settle(
                index,
                PhotoRecord(file_name=file.filename, encoded_image=encoded, tags=tags),
                failed=failed,
            )

    async def _decode(self, file: PhotoFile) -> str:
        try:
            content = await file.read()
        except Exception as exc:
            raise DecodeFailed(f"Couldn't read {file.filename}") from exc
        if not content:
            raise DecodeFailed(f"{file.filename} is empty")
        return to_data_url(content)

    async def _describe(self, file: PhotoFile, encoded: str) -> list[str]:
        try:
            return await self.descriptor.describe(encoded)
        except DescribeFailed:
            raise
        except Exception as exc:
            raise DescribeFailed(f"Couldn't describe {file.filename}") from exc
