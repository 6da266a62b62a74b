import asyncio
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from mangagate.client.fetch import FetchOptions, SleepFunc, resilient_fetch
from mangagate.constants import CHAPTER_LANGUAGE
from mangagate.exceptions import UpstreamError
from mangagate.models.config import Settings
from mangagate.models.manga import MangaStatistics

__all__ = ["MangaDexService", "QueryParams"]

QueryParams = list[tuple[str, str]]


class MangaDexService:
    """Lookups against the MangaDex API. Every call goes through resilient fetch."""

    def __init__(
        self, client: httpx.AsyncClient, settings: Settings, sleep: SleepFunc = asyncio.sleep
    ) -> None:
        """
        Initialize the MangaDexService.

        Args:
            client: Shared async HTTP client.
            settings: Upstream URLs and retry policy.
            sleep: Backoff sleep, replaced in tests.
        """
        self.client = client
        self.settings = settings
        self._sleep = sleep

    async def _fetch(self, url: str, options: FetchOptions | None = None) -> httpx.Response:
        return await resilient_fetch(
            self.client,
            url,
            options,
            timeout=self.settings.fetch_timeout,
            max_retries=self.settings.max_retries,
            backoff=self.settings.retry_backoff,
            sleep=self._sleep,
        )

    async def _get_json(self, path: str, params: QueryParams | None = None) -> dict[str, Any]:
        response = await self._fetch(
            f"{self.settings.api_base_url}{path}", FetchOptions(params=params)
        )
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {response.url}") from e
        if not isinstance(payload, dict):
            raise UpstreamError(f"Unexpected payload from {response.url}")
        return payload

    async def list_manga(self, params: QueryParams) -> dict[str, Any]:
        """Query ``/manga``. Returns the raw collection (``data``, ``total``, ...)."""
        return await self._get_json("/manga", params)

    async def get_manga(self, manga_id: str) -> dict[str, Any] | None:
        payload = await self._get_json(f"/manga/{quote(manga_id, safe='')}")
        return payload.get("data")

    async def list_tags(self) -> list[dict[str, Any]]:
        payload = await self._get_json("/manga/tag")
        return payload.get("data") or []

    async def get_cover_filename(self, cover_id: str) -> str | None:
        payload = await self._get_json(f"/cover/{quote(cover_id, safe='')}")
        return ((payload.get("data") or {}).get("attributes") or {}).get("fileName")

    async def get_author_name(self, author_id: str) -> str:
        payload = await self._get_json(f"/author/{quote(author_id, safe='')}")
        return ((payload.get("data") or {}).get("attributes") or {}).get("name") or "Unknown"

    async def get_chapters(self, manga_id: str, limit: int) -> list[dict[str, Any]]:
        """Return up to ``limit`` English chapters, highest chapter number first."""
        payload = await self._get_json(
            "/chapter",
            [
                ("manga", manga_id),
                ("limit", str(limit)),
                ("translatedLanguage[]", CHAPTER_LANGUAGE),
                ("order[chapter]", "desc"),
            ],
        )
        chapters = payload.get("data")
        if not isinstance(chapters, list):
            raise UpstreamError(f"Chapter list missing for manga {manga_id}")
        return chapters

    async def get_statistics(self, manga_id: str) -> MangaStatistics:
        payload = await self._get_json(f"/statistics/manga/{quote(manga_id, safe='')}")
        entry = (payload.get("statistics") or {}).get(manga_id) or {}
        rating = entry.get("rating") or {}
        return MangaStatistics(
            follows=entry.get("follows") or 0,
            rating_average=rating.get("average") or 0.0,
            rating_count=rating.get("count") or 0,
        )

    async def get_image(self, url: str) -> bytes:
        """Download an image, presenting ourselves as the MangaDex site."""
        logger.debug(f"Fetching image {url}")
        response = await self._fetch(
            url,
            FetchOptions(
                headers={
                    "Referer": self.settings.image_referer,
                    "User-Agent": self.settings.user_agent,
                }
            ),
        )
        return response.content
