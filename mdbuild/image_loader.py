# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
image_loader.py - Emit one source image as AVIF + WebP + baseline assets

load_deferred hands back the three reference ids immediately and fills
their bytes in the background; load_awaited waits for all three. The
baseline asset is always a raw copy of the source file.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from mdbuild.context import PluginContext
from mdbuild.errors import missing_image_error
from mdbuild.image_converter import MODERN_FORMATS, ImageConverter


@dataclass(frozen=True)
class ImageRefs:
    """Emitted asset reference ids for one image (jpeg = baseline copy)"""
    avif: str
    webp: str
    jpeg: str


@dataclass(frozen=True)
class DeferredImages:
    refs: ImageRefs
    # resolves once all three assets have their source set
    completion: asyncio.Future
    tasks: Tuple[asyncio.Future, ...] = ()

    def cancel(self) -> None:
        # a finished gather no longer reaches its children
        for task in self.tasks:
            task.cancel()
        self.completion.cancel()


class ImageAssetLoader:
    def __init__(self, converter: ImageConverter):
        self.converter = converter

    def load_deferred(
        self,
        ctx: PluginContext,
        source: Path,
        referenced_in: Optional[Path] = None,
    ) -> DeferredImages:
        """
        Emit the three assets now and schedule their content.

        Must be called with a running event loop.

        Raises:
            InputLayoutError: if the source image does not exist
        """
        source = Path(source)
        if not source.is_file():
            raise missing_image_error(source, referenced_in)

        converted = {fmt: self._emit_converted(ctx, source, fmt) for fmt in MODERN_FORMATS}

        jpeg_ref = ctx.emit_file(type="asset", name=source.name)
        jpeg_task = asyncio.ensure_future(self._copy_source(ctx, jpeg_ref, source))

        tasks = tuple(task for _, task in converted.values()) + (jpeg_task,)
        completion = asyncio.gather(*tasks)
        refs = ImageRefs(avif=converted["avif"][0], webp=converted["webp"][0], jpeg=jpeg_ref)
        return DeferredImages(refs, completion, tasks)

    async def load_awaited(
        self,
        ctx: PluginContext,
        source: Path,
        referenced_in: Optional[Path] = None,
    ) -> ImageRefs:
        """Emit the three assets and return once all of them have content."""
        deferred = self.load_deferred(ctx, source, referenced_in)
        try:
            await deferred.completion
        except BaseException:
            deferred.cancel()
            raise
        return deferred.refs

    def _emit_converted(self, ctx: PluginContext, source: Path, image_format: str):
        ref_id = ctx.emit_file(type="asset", name=f"{source.stem}.{image_format}")
        task = asyncio.ensure_future(self._convert_into(ctx, ref_id, source, image_format))
        return ref_id, task

    async def _convert_into(self, ctx: PluginContext, ref_id: str, source: Path, image_format: str) -> None:
        data = await self.converter.convert(source, image_format)
        ctx.set_asset_source(ref_id, data)

    @staticmethod
    async def _copy_source(ctx: PluginContext, ref_id: str, source: Path) -> None:
        data = await asyncio.to_thread(source.read_bytes)
        ctx.set_asset_source(ref_id, data)
