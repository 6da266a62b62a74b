"""JPEG thumbnails for the image proxy."""

import asyncio
import io

from PIL import Image

__all__ = ["THUMBNAIL_CONTENT_TYPE", "make_thumbnail", "render_thumbnail"]

THUMBNAIL_CONTENT_TYPE = "image/jpeg"


def make_thumbnail(data: bytes, width: int, quality: int) -> bytes:
    """
    Resize an encoded image to ``width`` pixels wide and re-encode it as JPEG.

    The aspect ratio is kept. Raises ``PIL.UnidentifiedImageError`` when the
    bytes are not a decodable image.
    """
    with Image.open(io.BytesIO(data)) as img:
        rgb = img.convert("RGB")
        height = max(1, round(rgb.height * width / rgb.width))
        resized = rgb.resize((width, height), Image.Resampling.LANCZOS)

    output = io.BytesIO()
    resized.save(output, format="JPEG", quality=quality)
    return output.getvalue()


async def render_thumbnail(data: bytes, width: int, quality: int) -> bytes:
    """Run ``make_thumbnail`` in a worker thread."""
    return await asyncio.to_thread(make_thumbnail, data, width, quality)
