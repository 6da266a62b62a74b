"""Upstream endpoints, defaults and thresholds."""

__all__ = [
    "CHAPTER_LANGUAGE",
    "DEFAULT_BACKOFF",
    "DEFAULT_FETCH_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_PUBLIC_URL",
    "DEFAULT_THUMBNAIL_QUALITY",
    "DEFAULT_THUMBNAIL_WIDTH",
    "DEFAULT_USER_AGENT",
    "HOT_FOLLOWS",
    "MANGADEX_API_URL",
    "MANGADEX_SITE_URL",
    "MANGADEX_UPLOADS_URL",
    "NEW_MANGA_DAYS",
    "PLACEHOLDER_COVER",
    "SORT_ORDERS",
    "SS_FOLLOWS",
    "WEEKLY_WINDOW_DAYS",
]

MANGADEX_API_URL = "https://api.mangadex.org"
MANGADEX_UPLOADS_URL = "https://uploads.mangadex.org"
MANGADEX_SITE_URL = "https://mangadex.org"
PLACEHOLDER_COVER = "https://via.placeholder.com/150"

DEFAULT_PUBLIC_URL = "http://localhost:5000"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/110.0.0.0 Safari/537.36"
)

# Resilient fetch, in seconds
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF = 2.0

DEFAULT_THUMBNAIL_WIDTH = 150
DEFAULT_THUMBNAIL_QUALITY = 80

# Popularity tags
SS_FOLLOWS = 50_000
HOT_FOLLOWS = 10_000
NEW_MANGA_DAYS = 30

WEEKLY_WINDOW_DAYS = 7
CHAPTER_LANGUAGE = "en"

SORT_ORDERS: dict[str, tuple[str, str]] = {
    "latest": ("order[latestUploadedChapter]", "desc"),
    "newest": ("order[createdAt]", "desc"),
    "top-view": ("order[followedCount]", "desc"),
}
