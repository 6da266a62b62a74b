"""Payload models returned to the front end. Field names are the JSON keys it reads."""

from pydantic import BaseModel

__all__ = [
    "ChapterEntry",
    "ChapterSummary",
    "Genre",
    "MangaCard",
    "MangaDetail",
    "MangaListing",
    "MangaPage",
    "MangaStatistics",
    "RankedManga",
    "WeeklyManga",
]


class ChapterSummary(BaseModel):
    id: str
    chapter: str = "N/A"
    title: str = ""
    updatedAt: str = "Unknown Date"  # noqa: N815


class ChapterEntry(BaseModel):
    id: str
    chapterNumber: str = "N/A"  # noqa: N815
    title: str = ""
    views: int
    uploadedTime: str  # noqa: N815


class MangaStatistics(BaseModel):
    """Follow count and rating of one manga, zero when upstream has no entry."""

    follows: int = 0
    rating_average: float = 0.0
    rating_count: int = 0


class MangaCard(BaseModel):
    """Entry of the latest / new feeds."""

    id: str
    title: str
    cover: str
    author: str
    chapters: list[ChapterSummary]
    tags: list[str]
    rating: str
    popularityTag: str  # noqa: N815


class RankedManga(BaseModel):
    """Entry of the all-time ranking."""

    id: str
    title: str
    chapters: ChapterSummary | None = None


class WeeklyManga(BaseModel):
    """Entry of the weekly ranking."""

    id: str
    title: str
    cover: str
    chapters: ChapterSummary | None = None


class MangaListing(BaseModel):
    """Entry of the paged lists (new, latest, top, filtered)."""

    id: str
    title: str
    cover: str
    description: str
    author: str
    chapters: ChapterSummary | None
    tags: list[str]
    rating: str
    lastUpdated: str | None  # noqa: N815
    views: int
    popularityTag: str  # noqa: N815
    totalManga: int  # noqa: N815


class MangaDetail(BaseModel):
    id: str
    title: str
    cover: str
    description: str
    alternativeTitles: list[str]  # noqa: N815
    authors: list[str]
    status: str
    genres: list[str]
    lastUpdated: str  # noqa: N815
    views: int
    rating: str
    totalLikes: int  # noqa: N815
    popularityTag: str  # noqa: N815
    chapters: list[ChapterEntry]


class Genre(BaseModel):
    id: str
    name: str


class MangaPage(BaseModel):
    total: int
    mangas: list[MangaListing]
