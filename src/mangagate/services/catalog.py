import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from loguru import logger

from mangagate.constants import SORT_ORDERS
from mangagate.exceptions import NotFoundError, UpstreamError
from mangagate.models.config import Settings
from mangagate.models.manga import (
    ChapterSummary,
    Genre,
    MangaCard,
    MangaDetail,
    MangaListing,
    MangaPage,
    MangaStatistics,
    RankedManga,
    WeeklyManga,
)
from mangagate.services.mangadex import MangaDexService, QueryParams
from mangagate.shaping import (
    alternative_titles,
    capitalize_status,
    chapter_entry,
    chapter_summary,
    cover_url,
    display_title,
    five_point_rating,
    format_display_time,
    is_recent,
    popularity_tag,
    proxied_image_url,
    relationship_ids,
    tag_names,
    weekly_window_start,
)

__all__ = ["CatalogService"]

T = TypeVar("T")

FEED_SIZE = 10
NEW_MANGA_POOL = 100
CARD_CHAPTERS = 3
DETAIL_CHAPTERS = 100
CREATORS = ("author", "artist")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _items(payload: dict[str, Any]) -> list[dict[str, Any]]:
    items = payload.get("data")
    if not isinstance(items, list):
        raise UpstreamError("Manga list missing from upstream response")
    return items


class CatalogService:
    """
    Builds the front-end payloads by fanning out over MangaDex lookups.

    Lookups run in one of two modes. Strict lookups let a failure propagate and
    fail the whole request. Best-effort lookups log the failure and fall back to
    a default (placeholder cover, unknown author, no chapters, zero stats).
    """

    def __init__(
        self,
        mangadex: MangaDexService,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.mangadex = mangadex
        self.settings = settings
        self._clock = clock

    # --- lookups ---

    async def _lookup(self, what: str, call: Awaitable[T], default: T, strict: bool) -> T:
        if strict:
            return await call
        try:
            return await call
        except Exception as e:
            logger.error(f"Failed to fetch {what}: {e}")
            return default

    async def _cover(self, manga: dict[str, Any], strict: bool, thumbnail: bool = True) -> str:
        placeholder = self.settings.placeholder_cover
        cover_ids = relationship_ids(manga, "cover_art")
        if not cover_ids:
            return placeholder

        file_name = await self._lookup(
            "cover", self.mangadex.get_cover_filename(cover_ids[0]), None, strict
        )
        if not file_name:
            return placeholder
        return cover_url(self.settings.uploads_base_url, manga["id"], file_name, thumbnail)

    async def _author(self, manga: dict[str, Any], strict: bool, kinds: tuple[str, ...]) -> str:
        author_ids = relationship_ids(manga, *kinds)
        if not author_ids:
            return "Unknown"
        return await self._lookup(
            "author", self.mangadex.get_author_name(author_ids[0]), "Unknown", strict
        )

    async def _chapters(self, manga_id: str, limit: int, strict: bool) -> list[ChapterSummary]:
        async def fetch() -> list[ChapterSummary]:
            chapters = await self.mangadex.get_chapters(manga_id, limit)
            return [chapter_summary(chapter) for chapter in chapters]

        return await self._lookup("chapters", fetch(), [], strict)

    async def _latest_chapter(self, manga_id: str) -> ChapterSummary | None:
        chapters = await self._chapters(manga_id, 1, strict=False)
        return chapters[0] if chapters else None

    async def _statistics(self, manga_id: str, strict: bool) -> MangaStatistics:
        return await self._lookup(
            "stats", self.mangadex.get_statistics(manga_id), MangaStatistics(), strict
        )

    def _proxied(self, url: str) -> str:
        return proxied_image_url(self.settings.public_url, url)

    # --- entry builders ---

    async def _card(
        self, manga: dict[str, Any], now: datetime, strict: bool, proxied: bool
    ) -> MangaCard:
        manga_id = manga["id"]
        attributes = manga.get("attributes") or {}

        cover = await self._cover(manga, strict)
        author = await self._author(manga, strict, CREATORS)
        chapters = await self._chapters(manga_id, CARD_CHAPTERS, strict)
        stats = await self._statistics(manga_id, strict)

        return MangaCard(
            id=manga_id,
            title=display_title(attributes),
            cover=self._proxied(cover) if proxied else cover,
            author=author,
            chapters=chapters,
            tags=tag_names(attributes),
            rating=five_point_rating(stats.rating_average),
            popularityTag=popularity_tag(stats.follows, attributes.get("createdAt"), now),
        )

    async def _listing(self, manga: dict[str, Any], total: int, now: datetime) -> MangaListing:
        manga_id = manga["id"]
        attributes = manga.get("attributes") or {}

        cover = await self._cover(manga, strict=True)
        author = await self._author(manga, strict=True, kinds=("author",))
        latest = await self._latest_chapter(manga_id)
        stats = await self._statistics(manga_id, strict=True)

        return MangaListing(
            id=manga_id,
            title=display_title(attributes),
            cover=self._proxied(cover),
            description=(attributes.get("description") or {}).get("en") or "No Description",
            author=author,
            chapters=latest,
            tags=tag_names(attributes),
            rating=five_point_rating(stats.rating_average),
            lastUpdated=attributes.get("updatedAt"),
            views=stats.follows,
            popularityTag=popularity_tag(stats.follows, attributes.get("createdAt"), now),
            totalManga=total,
        )

    async def _listings(self, params: QueryParams) -> tuple[int, list[MangaListing]]:
        payload = await self.mangadex.list_manga(params)
        items = _items(payload)
        total = payload.get("total") or 0
        now = self._clock()
        listings = await asyncio.gather(*(self._listing(manga, total, now) for manga in items))
        return total, list(listings)

    # --- operations ---

    async def latest_manga(self, offset: int = 0) -> list[MangaCard]:
        """Ten most recently updated manga, every lookup required."""
        payload = await self.mangadex.list_manga(
            [
                ("order[latestUploadedChapter]", "desc"),
                ("limit", str(FEED_SIZE)),
                ("offset", str(offset)),
            ]
        )
        now = self._clock()
        cards = await asyncio.gather(
            *(self._card(manga, now, strict=True, proxied=True) for manga in _items(payload))
        )
        return list(cards)

    async def new_manga(self, offset: int = 0) -> list[MangaCard]:
        """
        Ten manga created in the last 30 days among the latest updates.

        When fewer than ten are that new, older ones fill the list. Lookups are
        best-effort.
        """
        payload = await self.mangadex.list_manga(
            [
                ("order[latestUploadedChapter]", "desc"),
                ("limit", str(NEW_MANGA_POOL)),
                ("offset", str(offset)),
            ]
        )
        items = _items(payload)
        now = self._clock()

        recent = [m for m in items if is_recent((m.get("attributes") or {}).get("createdAt"), now)]
        older = [m for m in items if m not in recent]
        selected = (recent + older)[:FEED_SIZE]

        cards = await asyncio.gather(
            *(self._card(manga, now, strict=False, proxied=False) for manga in selected)
        )
        return list(cards)

    async def top_weekly(self, offset: int = 0) -> list[WeeklyManga]:
        now = self._clock()
        payload = await self.mangadex.list_manga(
            [
                ("limit", str(FEED_SIZE)),
                ("offset", str(offset)),
                ("includedTagsMode", "AND"),
                ("excludedTagsMode", "OR"),
                ("status[]", "ongoing"),
                ("status[]", "completed"),
                ("status[]", "hiatus"),
                ("contentRating[]", "safe"),
                ("contentRating[]", "suggestive"),
                ("contentRating[]", "erotica"),
                ("updatedAtSince", weekly_window_start(now)),
                ("order[latestUploadedChapter]", "desc"),
                ("includes[]", "manga"),
            ]
        )
        items = payload.get("data")
        if items is None:
            raise NotFoundError("No manga found")

        async def entry(manga: dict[str, Any]) -> WeeklyManga:
            cover = await self._cover(manga, strict=False)
            latest = await self._latest_chapter(manga["id"])
            return WeeklyManga(
                id=manga["id"],
                title=display_title(manga.get("attributes") or {}),
                cover=cover,
                chapters=latest,
            )

        return list(await asyncio.gather(*(entry(manga) for manga in items)))

    async def top_all_time(self) -> list[RankedManga]:
        payload = await self.mangadex.list_manga(
            [("limit", str(FEED_SIZE)), ("order[followedCount]", "desc")]
        )
        items = payload.get("data")
        if items is None:
            raise NotFoundError("No manga found")

        async def entry(manga: dict[str, Any]) -> RankedManga:
            return RankedManga(
                id=manga["id"],
                title=display_title(manga.get("attributes") or {}),
                chapters=await self._latest_chapter(manga["id"]),
            )

        return list(await asyncio.gather(*(entry(manga) for manga in items)))

    async def manga_detail(self, manga_id: str) -> MangaDetail:
        manga = await self.mangadex.get_manga(manga_id)
        if not manga:
            raise NotFoundError("Manga not found")

        attributes = manga.get("attributes") or {}
        now = self._clock()

        cover = await self._cover({**manga, "id": manga_id}, strict=True, thumbnail=False)
        authors = await asyncio.gather(
            *(self.mangadex.get_author_name(rel) for rel in relationship_ids(manga, *CREATORS))
        )
        stats = await self._statistics(manga_id, strict=True)
        chapters = await self.mangadex.get_chapters(manga_id, DETAIL_CHAPTERS)

        return MangaDetail(
            id=manga_id,
            title=display_title(attributes),
            cover=cover,
            description=(attributes.get("description") or {}).get("en") or "No Description",
            alternativeTitles=alternative_titles(attributes),
            authors=list(authors),
            status=capitalize_status(attributes.get("status")),
            genres=tag_names(attributes),
            lastUpdated=format_display_time(attributes.get("updatedAt")),
            views=stats.follows,
            rating=five_point_rating(stats.rating_average),
            totalLikes=stats.rating_count,
            popularityTag=popularity_tag(stats.follows, attributes.get("createdAt"), now),
            chapters=[chapter_entry(chapter) for chapter in chapters],
        )

    async def new_mangas(self, offset: int = 0, limit: int = FEED_SIZE) -> list[MangaListing]:
        _, listings = await self._listings(
            [
                ("order[createdAt]", "desc"),
                ("limit", str(limit)),
                ("offset", str(offset)),
                ("hasAvailableChapters", "true"),
            ]
        )
        return listings

    async def latest_mangas(self, offset: int = 0, limit: int = FEED_SIZE) -> list[MangaListing]:
        _, listings = await self._listings(
            [
                ("order[latestUploadedChapter]", "desc"),
                ("limit", str(limit)),
                ("offset", str(offset)),
            ]
        )
        return listings

    async def top_mangas(self, offset: int = 0, limit: int = FEED_SIZE) -> list[MangaListing]:
        _, listings = await self._listings(
            [
                ("order[followedCount]", "desc"),
                ("limit", str(limit)),
                ("offset", str(offset)),
            ]
        )
        return listings

    async def list_mangas(
        self,
        offset: int = 0,
        limit: int = FEED_SIZE,
        genres: str = "",
        status: str = "all",
        sort: str = "latest",
    ) -> MangaPage:
        """
        Filtered, sorted page of manga that have chapters.

        Args:
            offset: Pagination offset.
            limit: Page size.
            genres: Comma-separated tag ids that must all be present.
            status: Publication status, or ``"all"``.
            sort: ``latest``, ``newest`` or ``top-view``. Unknown keys sort by latest.
        """
        params: QueryParams = [
            SORT_ORDERS.get(sort, SORT_ORDERS["latest"]),
            ("limit", str(limit)),
            ("offset", str(offset)),
        ]
        params.extend(("includedTags[]", genre) for genre in genres.split(",") if genre)
        if status != "all":
            params.append(("status[]", status))
        params.append(("hasAvailableChapters", "true"))

        total, listings = await self._listings(params)
        return MangaPage(total=total, mangas=listings)

    async def genres(self) -> list[Genre]:
        result = []
        for tag in await self.mangadex.list_tags():
            names = (tag.get("attributes") or {}).get("name") or {}
            name = names.get("en") or next(iter(names.values()), "")
            result.append(Genre(id=tag["id"], name=name))
        return result
