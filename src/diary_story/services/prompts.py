"""Compile a diary context into a single generation prompt."""

from collections.abc import Sequence
from datetime import date

from diary_story.domain.context import Context

STYLE_INSTRUCTION = (
    "Write a fun, lightly roasted diary story with lots of emojis in simple "
    "English, about 10 lines max."
)
TONE_INSTRUCTION = (
    "Keep it casual, witty, and entertaining. Use playful jokes and funny remarks. "
    "Do NOT add markdown like ** or __ anywhere."
)
UNKNOWN_LOCATION = "unknown location"
NO_SONGS = "no songs"
NO_PHOTOS = "No photo uploaded."

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def compile_prompt(context: Context) -> str:
    """Return the prompt for a context.

    A non-blank free-form idea takes precedence over every collected source.
    """
    idea = (context.freeform_idea or "").strip()
    if idea:
        return f'{STYLE_INSTRUCTION} Based on this idea: "{idea}". {TONE_INSTRUCTION}'

    return render_diary_entry(
        diary_date=context.diary_date,
        location=context.location.resolved_name if context.location else None,
        songs=[track.render() for track in context.tracks],
        photos=[(photo.file_name, photo.description) for photo in context.photos],
    )


def render_diary_entry(
    *,
    diary_date: date,
    location: str | None,
    songs: Sequence[str],
    photos: Sequence[tuple[str, str]],
) -> str:
    """Render the dated entry prompt from already formatted parts.

    ``photos`` holds ``(file_name, description)`` pairs in upload order.
    """
    lines = [
        f"Diary Entry: {format_diary_date(diary_date)}",
        f"Location: {location or UNKNOWN_LOCATION}",
        f"Spotify Playlist songs: {', '.join(songs) if songs else NO_SONGS}",
        "Uploaded photo(s):",
        _format_photos(photos),
        "",
        f"{STYLE_INSTRUCTION} {TONE_INSTRUCTION}",
    ]
    return "\n".join(lines)


def format_diary_date(value: date) -> str:
    """Format a date like ``October 19, 2026`` regardless of the host locale."""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def _format_photos(photos: Sequence[tuple[str, str]]) -> str:
    if not photos:
        return NO_PHOTOS
    return "\n".join(
        f'Photo {index} named "{name}" showing: {description}'
        for index, (name, description) in enumerate(photos, start=1)
    )
