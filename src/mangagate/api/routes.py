from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from mangagate.api.errors import upstream_errors
from mangagate.models.config import Settings
from mangagate.models.manga import (
    Genre,
    MangaCard,
    MangaDetail,
    MangaListing,
    MangaPage,
    RankedManga,
    WeeklyManga,
)
from mangagate.services.catalog import CatalogService
from mangagate.services.imaging import THUMBNAIL_CONTENT_TYPE, render_thumbnail
from mangagate.services.mangadex import MangaDexService

__all__ = ["router"]

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mangadex(request: Request) -> MangaDexService:
    return request.app.state.mangadex


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


Catalog = Annotated[CatalogService, Depends(get_catalog)]
Offset = Annotated[int, Query(ge=0)]
Limit = Annotated[int, Query(ge=1, le=100)]


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/proxy-image", response_class=Response)
async def proxy_image(
    url: str,
    mangadex: Annotated[MangaDexService, Depends(get_mangadex)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Fetch a remote image and return a JPEG thumbnail of it."""
    with upstream_errors("Failed to load image"):
        original = await mangadex.get_image(url)
        thumbnail = await render_thumbnail(
            original, settings.thumbnail_width, settings.thumbnail_quality
        )
    return Response(content=thumbnail, media_type=THUMBNAIL_CONTENT_TYPE)


@router.get("/latest-manga")
async def latest_manga(catalog: Catalog, offset: Offset = 0) -> list[MangaCard]:
    with upstream_errors("Failed to fetch manga data"):
        return await catalog.latest_manga(offset)


@router.get("/new-manga")
async def new_manga(catalog: Catalog, offset: Offset = 0) -> list[MangaCard]:
    with upstream_errors("Failed to fetch new manga"):
        return await catalog.new_manga(offset)


@router.get("/top-weekly")
async def top_weekly(catalog: Catalog, offset: Offset = 0) -> list[WeeklyManga]:
    with upstream_errors("Failed to fetch top weekly manga"):
        return await catalog.top_weekly(offset)


@router.get("/top-all-time")
async def top_all_time(catalog: Catalog) -> list[RankedManga]:
    with upstream_errors("Failed to fetch top all-time manga"):
        return await catalog.top_all_time()


@router.get("/manga/{manga_id}")
async def manga_detail(manga_id: str, catalog: Catalog) -> MangaDetail:
    with upstream_errors("Failed to fetch manga details"):
        return await catalog.manga_detail(manga_id)


@router.get("/new-mangas")
async def new_mangas(
    catalog: Catalog, offset: Offset = 0, limit: Limit = 10
) -> list[MangaListing]:
    with upstream_errors("Failed to fetch manga data"):
        return await catalog.new_mangas(offset, limit)


@router.get("/latest-mangas-list")
async def latest_mangas_list(
    catalog: Catalog, offset: Offset = 0, limit: Limit = 10
) -> list[MangaListing]:
    with upstream_errors("Failed to fetch manga data"):
        return await catalog.latest_mangas(offset, limit)


@router.get("/top-mangas")
async def top_mangas(
    catalog: Catalog, offset: Offset = 0, limit: Limit = 10
) -> list[MangaListing]:
    with upstream_errors("Failed to fetch manga data"):
        return await catalog.top_mangas(offset, limit)


@router.get("/genres")
async def genres(catalog: Catalog) -> list[Genre]:
    with upstream_errors("Failed to fetch genres"):
        return await catalog.genres()


@router.get("/list-mangas")
async def list_mangas(
    catalog: Catalog,
    offset: Offset = 0,
    limit: Limit = 10,
    genres: str = "",
    status: str = "all",
    sort: str = "latest",
) -> MangaPage:
    with upstream_errors("Failed to fetch manga data"):
        return await catalog.list_mangas(offset, limit, genres, status, sort)
