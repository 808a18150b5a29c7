"""
meta_module.py - Source text of the generated JavaScript modules

- the aggregate metadata module: export default [ {record}, ... ];
- one content module per post: export const CONTENT = `<html>`;
"""

from __future__ import annotations

from typing import Iterable

from mdbuild.models import PostMetadata
from mdbuild.string_utils import single_literal
from mdbuild.url_utils import meta_asset, meta_import

RECORD_TEMPLATE = """
    {{
        title: {title},
        category: {category},
        imgUrls: {{
            avif: {avif},
            webp: {webp},
            jpeg: {jpeg}
        }},
        author: {author},
        date: {date},
        url: {url},
        html: {html},
        abstract: {abstract}
    }},"""


def render_record(post: PostMetadata) -> str:
    return RECORD_TEMPLATE.format(
        title=single_literal(post.title),
        category=single_literal(post.category),
        avif=meta_asset(post.cover_images.avif),
        webp=meta_asset(post.cover_images.webp),
        jpeg=meta_asset(post.cover_images.jpeg),
        author=single_literal(post.author),
        date=single_literal(post.date),
        url=single_literal(post.url),
        html=meta_import(post.content_ref),
        abstract=single_literal(post.abstract),
    )


def render_meta_module(posts: Iterable[PostMetadata]) -> str:
    records = "".join(render_record(post) for post in posts)
    return f"export default [{records}\n];\n"


def render_content_module(template_html: str) -> str:
    """template_html must already be escaped for a template literal."""
    return f"export const CONTENT = `{template_html}`;\n"
