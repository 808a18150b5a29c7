# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
image_converter.py - Re-encode source images into web formats

ImageConverter.convert(source, format) returns the encoded bytes, going
to the encoder only on a cache miss. Concurrent first requests for the
same (source, format) pair are not deduplicated; both encode and both
write the same cache file, which the atomic rename makes harmless.
"""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image

from mdbuild.errors import conversion_error
from mdbuild.image_cache import ImageCache, cache_key

logger = logging.getLogger(__name__)

# Modern lossy formats emitted next to the baseline copy of the source
MODERN_FORMATS = ("avif", "webp")

PIL_FORMATS = {
    "avif": "AVIF",
    "webp": "WEBP",
    "jpeg": "JPEG",
    "png": "PNG",
}


class PillowEncoder:
    """Encode an image file into one of PIL_FORMATS using Pillow."""

    def __init__(self, quality: int = 80):
        self.quality = quality

    def encode(self, source: Path, image_format: str) -> bytes:
        pil_format = PIL_FORMATS.get(image_format)
        if pil_format is None:
            raise conversion_error(Path(source), image_format)

        buffer = io.BytesIO()
        try:
            with Image.open(source) as img:
                img.load()
                img = self._prepare(img, pil_format)
                if pil_format == "PNG":
                    img.save(buffer, pil_format, optimize=True)
                else:
                    img.save(buffer, pil_format, quality=self.quality)
        except (OSError, ValueError, KeyError) as e:
            # KeyError: Pillow built without an encoder for pil_format
            raise conversion_error(Path(source), image_format, cause=e) from e

        return buffer.getvalue()

    @staticmethod
    def _prepare(img: Image.Image, pil_format: str) -> Image.Image:
        has_alpha = "A" in img.getbands() or "transparency" in img.info
        if pil_format == "JPEG":
            if img.mode in ("RGB", "L"):
                return img
            if has_alpha:
                rgba = img.convert("RGBA")
                background = Image.new("RGB", rgba.size, (255, 255, 255))
                background.paste(rgba, mask=rgba.split()[-1])
                return background
            return img.convert("RGB")
        if img.mode not in ("RGB", "RGBA"):
            return img.convert("RGBA" if has_alpha else "RGB")
        return img


class ImageConverter:
    """convert(source, format) -> bytes, backed by an ImageCache."""

    def __init__(self, cache: ImageCache, encoder: Optional[PillowEncoder] = None):
        self.cache = cache
        self.encoder = encoder or PillowEncoder()

    async def convert(self, source: Path, image_format: str) -> bytes:
        key = cache_key(source, image_format)

        cached = await asyncio.to_thread(self.cache.get, key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached

        logger.debug("Converting %s -> %s", Path(source).name, image_format)
        data = await asyncio.to_thread(self.encoder.encode, Path(source), image_format)
        await asyncio.to_thread(self.cache.put, key, data)
        return data
