# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
plugin.py - The md-build bundler plugin

Hooks, in the order a host calls them:
- build_start(ctx): scan posts, emit images and content modules, generate
  the metadata module
- resolve_id(ctx, source, importer): route imports of the configured
  meta module path to the virtual metadata module
- load(ctx, id): serve virtual module source text
- build_end(ctx, error): wait for every outstanding image task, then write
  sitemap.xml; a failed build writes nothing

build_start returns as soon as the module text is known; image bytes may
still be in flight until build_end.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from mdbuild import sitemap
from mdbuild.config_utils import MdBuildConfig
from mdbuild.context import PluginContext
from mdbuild.image_cache import ImageCache
from mdbuild.image_converter import ImageConverter, PillowEncoder
from mdbuild.image_loader import ImageAssetLoader
from mdbuild.md_renderer import MarkdownRenderer
from mdbuild.meta_module import render_meta_module
from mdbuild.models import PostMetadata
from mdbuild.processor import iter_posts
from mdbuild.registry import ContentModuleRegistry
from mdbuild.tasks import TaskQueue

logger = logging.getLogger(__name__)

# Well-known id of the generated metadata module
META_ID = "\0mdbuild:meta"


class MdBuild:
    name = "md-build"

    def __init__(
        self,
        config: MdBuildConfig,
        cache: Optional[ImageCache] = None,
        converter: Optional[ImageConverter] = None,
    ):
        self.config = config
        self.base_path = config.content_path
        self.meta_path = config.meta_module_path
        self.cache = cache or ImageCache(config.cache_path)
        self.converter = converter or ImageConverter(self.cache, PillowEncoder(config.image_quality))
        self.registry = ContentModuleRegistry()
        self.task_queue = TaskQueue()
        self.posts: List[PostMetadata] = []
        self._sitemap_urls: Optional[List[str]] = None

    async def build_start(self, ctx: PluginContext) -> None:
        await asyncio.to_thread(self.cache.load)
        self.registry.reserve(META_ID)

        loader = ImageAssetLoader(self.converter)
        renderer = MarkdownRenderer(ctx, loader, self.config.default_language)

        posts = []
        async for post in iter_posts(ctx, self.base_path, loader, renderer, self.registry, self.task_queue):
            posts.append(post)
        self.posts = posts

        ctx.emit_file(type="chunk", id=str(self.meta_path))
        self.registry.register(META_ID, render_meta_module(posts))
        logger.info("Generated metadata for %d post(s)", len(posts))

        self._sitemap_urls = [post.url for post in posts]

    async def build_end(self, ctx: PluginContext, error: Optional[BaseException] = None) -> None:
        if error is not None:
            cancelled = self.task_queue.cancel_all()
            logger.debug("Build failed; cancelled %d pending task(s)", cancelled)
            return

        await self.task_queue.drain()

        if self._sitemap_urls is not None:
            await asyncio.to_thread(
                sitemap.generate,
                self.config.base_url,
                self._sitemap_urls,
                self.config.out_path,
            )

    def resolve_id(self, ctx: PluginContext, source: str, importer: Optional[str] = None) -> Optional[str]:
        if source in self.registry:
            return source

        full_path = self._full_js_file_path(source, importer)
        if full_path is not None and full_path == self.meta_path:
            return META_ID

        return None

    def load(self, ctx: PluginContext, module_id: str) -> Optional[str]:
        return self.registry.source(module_id)

    @staticmethod
    def _full_js_file_path(source: str, importer: Optional[str]) -> Optional[Path]:
        if not source.endswith(".js"):
            return None

        base = Path(importer).parent if importer else Path.cwd()
        return (base / source).resolve()
