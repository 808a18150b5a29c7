"""
models.py - Records produced by the content pipeline
"""

from __future__ import annotations

from dataclasses import dataclass

from mdbuild.image_loader import ImageRefs


@dataclass(frozen=True)
class PostMetadata:
    """One post's entry in the generated metadata module"""
    title: str
    category: str
    author: str
    abstract: str
    date: str
    url: str
    cover_images: ImageRefs
    # reference id of the emitted chunk holding the rendered HTML
    content_ref: str
