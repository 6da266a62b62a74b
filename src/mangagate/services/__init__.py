from .catalog import CatalogService
from .imaging import make_thumbnail, render_thumbnail
from .mangadex import MangaDexService

__all__ = ["CatalogService", "MangaDexService", "make_thumbnail", "render_thumbnail"]
