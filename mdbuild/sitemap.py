"""
sitemap.py - Write sitemap.xml for the site root and every post URL
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable
from xml.sax.saxutils import escape

from mdbuild.errors import unwritable_path_error

logger = logging.getLogger(__name__)

SITEMAP_FILE = "sitemap.xml"
CHANGE_FREQUENCY = "daily"
PRIORITY = "0.7"

URLSET_OPEN = (
    '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"'
    ' xmlns:news="http://www.google.com/schemas/sitemap-news/0.9"'
    ' xmlns:xhtml="http://www.w3.org/1999/xhtml"'
    ' xmlns:mobile="http://www.google.com/schemas/sitemap-mobile/1.0"'
    ' xmlns:image="http://www.google.com/schemas/sitemap-image/1.1"'
    ' xmlns:video="http://www.google.com/schemas/sitemap-video/1.1">'
)


def _site(url: str) -> str:
    return (
        f"<url> <loc>{escape(url)}</loc> <changefreq>{CHANGE_FREQUENCY}</changefreq>"
        f" <priority>{PRIORITY}</priority> </url>"
    )


def render_sitemap(base_url: str, urls: Iterable[str]) -> str:
    base = base_url[:-1] if base_url.endswith("/") else base_url
    body = "\n".join(_site(base + url) for url in ["/", *urls])
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{URLSET_OPEN}\n{body}\n</urlset>\n'


def generate(base_url: str, urls: Iterable[str], target_dir: Path) -> Path:
    """
    Write <target_dir>/sitemap.xml; '/' is always the first entry.

    Raises:
        BuildIOError: if target_dir cannot be created or written
    """
    urls = list(urls)
    target = Path(target_dir) / SITEMAP_FILE
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_sitemap(base_url, urls), encoding="utf-8")
    except OSError as e:
        raise unwritable_path_error(target, cause=e) from e

    logger.info("Wrote %s (%d urls)", target, len(urls) + 1)
    return target
