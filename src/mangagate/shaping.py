"""Pure helpers turning MangaDex JSON into front-end fields."""

import random
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import quote

from mangagate.constants import HOT_FOLLOWS, NEW_MANGA_DAYS, SS_FOLLOWS, WEEKLY_WINDOW_DAYS
from mangagate.models.manga import ChapterEntry, ChapterSummary

__all__ = [
    "alternative_titles",
    "capitalize_status",
    "chapter_entry",
    "chapter_summary",
    "cover_url",
    "display_title",
    "five_point_rating",
    "format_display_time",
    "is_recent",
    "parse_timestamp",
    "popularity_tag",
    "proxied_image_url",
    "relationship_ids",
    "tag_names",
    "weekly_window_start",
]

NO_TITLE = "No Title"
UNKNOWN_DATE = "Unknown Date"


def display_title(attributes: dict[str, Any]) -> str:
    """
    Pick the title shown to readers.

    English title first, then the first English alt title, then the first value
    of the first alt title.
    """
    title = (attributes.get("title") or {}).get("en")
    if title:
        return title

    alt_titles: list[dict[str, str]] = attributes.get("altTitles") or []
    if not alt_titles:
        return NO_TITLE
    for alt in alt_titles:
        if alt.get("en"):
            return alt["en"]
    return next(iter(alt_titles[0].values()), NO_TITLE)


def alternative_titles(attributes: dict[str, Any]) -> list[str]:
    return [next(iter(alt.values())) for alt in attributes.get("altTitles") or [] if alt]


def tag_names(attributes: dict[str, Any]) -> list[str]:
    names = []
    for tag in attributes.get("tags") or []:
        name = tag.get("attributes", {}).get("name", {}).get("en")
        if name:
            names.append(name)
    return names


def relationship_ids(manga: dict[str, Any], *types: str) -> list[str]:
    """Return the ids of the manga's relationships of the given types, in order."""
    return [rel["id"] for rel in manga.get("relationships") or [] if rel.get("type") in types]


def cover_url(uploads_base_url: str, manga_id: str, file_name: str, thumbnail: bool = True) -> str:
    url = f"{uploads_base_url}/covers/{manga_id}/{file_name}"
    return f"{url}.256.jpg" if thumbnail else url


def proxied_image_url(public_url: str, image_url: str) -> str:
    return f"{public_url}/proxy-image?url={quote(image_url, safe='')}"


def five_point_rating(average: float | None) -> str:
    """Convert MangaDex's 10-point average to a 5-point string, ``"N/A"`` when unrated."""
    if not average:
        return "N/A"
    return f"{average / 2:.1f}"


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_recent(created_at: str | None, now: datetime, days: int = NEW_MANGA_DAYS) -> bool:
    created = parse_timestamp(created_at)
    if created is None:
        return False
    return now - created < timedelta(days=days)


def popularity_tag(follows: int, created_at: str | None, now: datetime) -> str:
    """Return ``"new"``, ``"ss"``, ``"hot"`` or ``""``. Recency wins over follows."""
    if is_recent(created_at, now):
        return "new"
    if follows > SS_FOLLOWS:
        return "ss"
    if follows > HOT_FOLLOWS:
        return "hot"
    return ""


def format_display_time(value: str | None) -> str:
    """Format an ISO timestamp like ``Mar 05, 2024, 03:04 PM`` (UTC)."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return UNKNOWN_DATE
    return parsed.astimezone(timezone.utc).strftime("%b %d, %Y, %I:%M %p")


def capitalize_status(status: str | None) -> str:
    if not status:
        return ""
    return status[:1].upper() + status[1:]


def weekly_window_start(now: datetime) -> str:
    return (now - timedelta(days=WEEKLY_WINDOW_DAYS)).strftime("%Y-%m-%dT%H:%M:%S")


def chapter_summary(chapter: dict[str, Any]) -> ChapterSummary:
    attributes = chapter.get("attributes") or {}
    return ChapterSummary(
        id=chapter["id"],
        chapter=attributes.get("chapter") or "N/A",
        title=attributes.get("title") or "",
        updatedAt=attributes.get("readableAt") or UNKNOWN_DATE,
    )


def chapter_entry(chapter: dict[str, Any]) -> ChapterEntry:
    attributes = chapter.get("attributes") or {}
    return ChapterEntry(
        id=chapter["id"],
        chapterNumber=attributes.get("chapter") or "N/A",
        title=attributes.get("title") or "",
        # MangaDex exposes no view counts
        views=random.randint(1000, 5999),  # noqa: S311
        uploadedTime=format_display_time(attributes.get("readableAt")),
    )
