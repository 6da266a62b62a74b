from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from mangagate.models.config import Settings

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings() -> Settings:
    """Settings with the default upstream URLs and no backoff wait."""
    return Settings(_env_file=None, retry_backoff=0)  # type: ignore[call-arg]


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: NOW


@pytest.fixture
def make_manga() -> Callable[..., dict[str, Any]]:
    """Factory for MangaDex manga resources."""

    def factory(
        manga_id: str = "m1",
        title: str | None = "One Piece",
        created_at: str = "2020-01-01T00:00:00+00:00",
        updated_at: str = "2024-06-10T09:30:00+00:00",
        cover_id: str | None = "c1",
        author_id: str | None = "a1",
        artist_id: str | None = None,
        alt_titles: list[dict[str, str]] | None = None,
        tags: tuple[str, ...] = ("Action", "Adventure"),
        status: str = "ongoing",
        description: str | None = "Pirates.",
    ) -> dict[str, Any]:
        relationships = []
        if author_id:
            relationships.append({"id": author_id, "type": "author"})
        if artist_id:
            relationships.append({"id": artist_id, "type": "artist"})
        if cover_id:
            relationships.append({"id": cover_id, "type": "cover_art"})
        return {
            "id": manga_id,
            "type": "manga",
            "attributes": {
                "title": {"en": title} if title else {"ja-ro": "Wan Pisu"},
                "altTitles": alt_titles or [],
                "description": {"en": description} if description else {},
                "status": status,
                "createdAt": created_at,
                "updatedAt": updated_at,
                "tags": [{"attributes": {"name": {"en": name}}} for name in tags],
            },
            "relationships": relationships,
        }

    return factory


@pytest.fixture
def make_chapter() -> Callable[..., dict[str, Any]]:
    """Factory for MangaDex chapter resources."""

    def factory(
        chapter_id: str = "ch1",
        number: str | None = "1100",
        title: str | None = "The Promise",
        readable_at: str | None = "2024-06-09T15:04:00+00:00",
    ) -> dict[str, Any]:
        return {
            "id": chapter_id,
            "type": "chapter",
            "attributes": {"chapter": number, "title": title, "readableAt": readable_at},
        }

    return factory
