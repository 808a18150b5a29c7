# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
md_renderer.py - Render a post body to HTML for a generated JS module

- Fenced code blocks are highlighted with Pygments; an unknown or missing
  language falls back to the configured default instead of failing.
- Math ($...$, $$...$$) goes through pymdownx.arithmatex.
- Every local image becomes a <picture> with AVIF/WebP sources and a
  baseline <img>, each pointing at an emitted asset through an asset-URL
  indirection. Absolute URLs are left alone.

render() returns the body of a template literal: everything is escaped
for `...` except the ${...} asset expressions, plus the image tasks it
started so the caller can queue them.
"""

from __future__ import annotations

import re
import uuid
import xml.etree.ElementTree as etree
from pathlib import Path
from typing import List, NamedTuple, Optional, Tuple

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from mdbuild.context import PluginContext
from mdbuild.image_loader import DeferredImages, ImageAssetLoader
from mdbuild.string_utils import escape_template
from mdbuild.url_utils import is_absolute, meta_asset

DEFAULT_LANGUAGE = "markdown"

FENCE_RE = re.compile(
    r"(?P<fence>^(?:~{3,}|`{3,}))[ ]*"
    r"(\{?\.?(?P<lang>[\w#.+-]*)\}?)?[ ]*\n"
    r"(?P<code>.*?)(?<=\n)"
    r"(?P=fence)[ ]*$",
    re.MULTILINE | re.DOTALL,
)

PICTURE_SOURCES = (
    ("avif", "image/avif"),
    ("webp", "image/webp"),
)


class RenderResult(NamedTuple):
    html: str
    tasks: Tuple


def highlight_code(code: str, language: str = "", default_language: str = DEFAULT_LANGUAGE) -> str:
    lexer = None
    if language:
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            lexer = None
    if lexer is None:
        language = default_language
        lexer = get_lexer_by_name(default_language)

    body = highlight(code, lexer, HtmlFormatter(nowrap=True))
    return f'<pre><code class="highlight {language}">{body}</code></pre>'


class _AssetCollector:
    """Per-render state: emitted image refs, their markers and pending tasks."""

    def __init__(self, ctx: PluginContext, loader: ImageAssetLoader, base_path: Path, source_file: Path):
        self.ctx = ctx
        self.loader = loader
        self.base_path = base_path
        self.source_file = source_file
        self.deferred: List[DeferredImages] = []
        self.marked_refs: List[str] = []
        self._nonce = uuid.uuid4().hex

    @property
    def tasks(self) -> Tuple:
        return tuple(deferred.completion for deferred in self.deferred)

    def marker_for(self, ref_id: str) -> str:
        marker = f"mdbuild-asset-{self._nonce}-{len(self.marked_refs)}-end"
        self.marked_refs.append(ref_id)
        return marker

    def load(self, src: str):
        deferred = self.loader.load_deferred(self.ctx, (self.base_path / src).resolve(), self.source_file)
        self.deferred.append(deferred)
        return deferred.refs

    def substitute(self, text: str) -> str:
        if not self.marked_refs:
            return text
        # one pass; a marker is never a prefix of another
        pattern = re.compile(rf"mdbuild-asset-{self._nonce}-(\d+)-end")
        return pattern.sub(lambda m: "${" + meta_asset(self.marked_refs[int(m.group(1))]) + "}", text)

    def cancel(self) -> None:
        for deferred in self.deferred:
            deferred.cancel()


class HighlightedFencePreprocessor(Preprocessor):
    def __init__(self, md, default_language: str):
        super().__init__(md)
        self.default_language = default_language

    def run(self, lines):
        text = "\n".join(lines)
        text = FENCE_RE.sub(self._replace, text)
        return text.split("\n")

    def _replace(self, m: re.Match) -> str:
        code_html = highlight_code(m.group("code"), m.group("lang") or "", self.default_language)
        placeholder = self.md.htmlStash.store(code_html)
        return f"\n\n{placeholder}\n\n"


class PictureTreeprocessor(Treeprocessor):
    def __init__(self, md, collector: _AssetCollector):
        super().__init__(md)
        self.collector = collector

    def run(self, root):
        for parent in list(root.iter()):
            for index, child in enumerate(list(parent)):
                if child.tag != "img":
                    continue
                src = child.get("src", "")
                if not src or is_absolute(src):
                    continue
                parent[index] = self._picture(child, src)

    def _picture(self, img: etree.Element, src: str) -> etree.Element:
        refs = self.collector.load(src)

        picture = etree.Element("picture")
        for image_format, mime in PICTURE_SOURCES:
            source = etree.SubElement(picture, "source")
            source.set("type", mime)
            source.set("srcset", self.collector.marker_for(getattr(refs, image_format)))

        fallback = etree.SubElement(picture, "img")
        fallback.set("src", self.collector.marker_for(refs.jpeg))
        fallback.set("alt", img.get("alt", ""))
        if img.get("title"):
            fallback.set("title", img.get("title"))
        fallback.set("loading", "lazy")
        fallback.set("decoding", "async")

        picture.tail = img.tail
        return picture


class MdBuildExtension(Extension):
    def __init__(self, collector: _AssetCollector, default_language: str = DEFAULT_LANGUAGE, **kwargs):
        super().__init__(**kwargs)
        self.collector = collector
        self.default_language = default_language

    def extendMarkdown(self, md):
        # ahead of the stock fenced_code preprocessor (25)
        md.preprocessors.register(
            HighlightedFencePreprocessor(md, self.default_language),
            "highlighted_fence",
            26
        )
        # after inline patterns (20) have produced <img> elements
        md.treeprocessors.register(
            PictureTreeprocessor(md, self.collector),
            "picture",
            15
        )


class MarkdownRenderer:
    def __init__(self, ctx: PluginContext, loader: ImageAssetLoader, default_language: str = DEFAULT_LANGUAGE):
        self.ctx = ctx
        self.loader = loader
        self.default_language = default_language

    def render(self, body: str, base_path: Path, source_file: Optional[Path] = None) -> RenderResult:
        """
        Render body; image paths resolve against base_path.

        Must be called with a running event loop (images are scheduled
        as tasks).
        """
        base_path = Path(base_path)
        collector = _AssetCollector(self.ctx, self.loader, base_path, source_file or base_path / "index.md")
        md = markdown.Markdown(
            extensions=[
                MdBuildExtension(collector, self.default_language),
                "tables",
                "pymdownx.arithmatex",
            ],
            extension_configs={
                "pymdownx.arithmatex": {"generic": True},
            },
        )

        try:
            html = md.convert(body)
        except Exception:
            collector.cancel()
            raise

        return RenderResult(collector.substitute(escape_template(html)), collector.tasks)
