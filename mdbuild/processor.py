# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
processor.py - Turn each <date>--<slug>/ directory into a PostMetadata

For every post directory:
- parse index.md (front matter + body)
- emit the cover image and wait for it (it lands in the metadata module)
- render the body; embedded images are only scheduled
- register the rendered HTML as the virtual module <slug>.js
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterator

from mdbuild.context import PluginContext
from mdbuild.frontmatter_parser import INDEX_FILE, load_post_source
from mdbuild.fs_utils import list_subdirectories
from mdbuild.image_loader import ImageAssetLoader
from mdbuild.md_renderer import MarkdownRenderer
from mdbuild.meta_module import render_content_module
from mdbuild.models import PostMetadata
from mdbuild.registry import ContentModuleRegistry
from mdbuild.tasks import TaskQueue

logger = logging.getLogger(__name__)


def content_module_id(slug: str) -> str:
    return f"{slug}.js"


async def iter_posts(
    ctx: PluginContext,
    base_dir: Path,
    loader: ImageAssetLoader,
    renderer: MarkdownRenderer,
    registry: ContentModuleRegistry,
    task_queue: TaskQueue,
) -> AsyncIterator[PostMetadata]:
    """
    Yield one PostMetadata per post directory, in directory listing order.

    Any failure aborts the iteration; there is no per-post recovery.
    """
    base_dir = Path(base_dir)
    for sub_dir in list_subdirectories(base_dir):
        folder = base_dir / sub_dir
        index_path = folder / INDEX_FILE

        post = await asyncio.to_thread(load_post_source, folder)
        logger.info("Processing %s", sub_dir)

        cover_images = await loader.load_awaited(ctx, post.cover_path, index_path)

        rendered = renderer.render(post.body, folder, index_path)
        task_queue.extend(rendered.tasks)

        file_id = content_module_id(post.slug)
        registry.register(file_id, render_content_module(rendered.html))
        content_ref = ctx.emit_file(type="chunk", id=file_id)

        yield PostMetadata(
            title=post.text("title"),
            category=post.text("category"),
            author=post.text("author"),
            abstract=post.text("abstract"),
            date=post.date,
            url=f"/{post.slug}",
            cover_images=cover_images,
            content_ref=content_ref,
        )
