# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
frontmatter_parser.py - Split a post's index.md into front matter + body

A post lives in a directory named <date>--<slug> holding index.md and a
cover image. The directory-derived date always wins over a front matter
date.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import frontmatter
import yaml

from mdbuild.errors import (
    invalid_dir_name_error,
    invalid_frontmatter_error,
    malformed_frontmatter_error,
    missing_index_error,
)

INDEX_FILE = "index.md"
DIR_NAME_DELIMITER = "--"
REQUIRED_FIELDS = ["title", "category", "author", "cover"]


@dataclass(frozen=True)
class PostSource:
    """One post read from disk; discarded once its metadata is built"""
    folder: Path
    date: str
    slug: str
    front_matter: Dict[str, Any] = field(default_factory=dict)
    body: str = ""

    @property
    def cover_path(self) -> Path:
        return (self.folder / str(self.front_matter["cover"])).resolve()

    def text(self, key: str) -> str:
        """Front matter value as text ('' when absent)"""
        value = self.front_matter.get(key)
        if value is None:
            return ""
        return str(value)


def split_dir_name(name: str) -> Tuple[str, str]:
    """
    Split a post directory name on its first '--' into (date, slug).

    Raises:
        InputLayoutError: if either side of the delimiter is missing
    """
    date, sep, slug = name.partition(DIR_NAME_DELIMITER)
    if not sep or not date or not slug:
        raise invalid_dir_name_error(Path(name))
    return date, slug


def parse_front_matter(raw: bytes, source: Optional[Path] = None) -> Tuple[Dict[str, Any], str]:
    """
    Split raw index.md bytes into (front matter mapping, body text).

    Raises:
        ParseError: if the file is not UTF-8, the '---' delimiters are
            unbalanced, or the block is not a YAML mapping
    """
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise malformed_frontmatter_error(source, cause=e) from e

    opens_block = text.lstrip().startswith("---")
    if opens_block and not frontmatter.checks(text):
        raise malformed_frontmatter_error(source)

    try:
        post = frontmatter.loads(text)
    except (yaml.YAMLError, ValueError) as e:
        # ValueError: opening delimiter without a closing one
        raise malformed_frontmatter_error(source, cause=e) from e

    if opens_block and not post.metadata:
        # python-frontmatter drops blocks that are not mappings
        raise malformed_frontmatter_error(source)

    return dict(post.metadata), post.content


def validate_front_matter(metadata: Dict[str, Any], source: Path) -> None:
    missing = [key for key in REQUIRED_FIELDS if metadata.get(key) in (None, "")]
    if missing:
        raise invalid_frontmatter_error(source, missing, REQUIRED_FIELDS)


def load_post_source(folder: Path) -> PostSource:
    """
    Read and validate <folder>/index.md.

    Raises:
        InputLayoutError: bad directory name or missing index.md
        ParseError: malformed or incomplete front matter
    """
    folder = Path(folder)
    date, slug = split_dir_name(folder.name)

    index_path = folder / INDEX_FILE
    try:
        raw = index_path.read_bytes()
    except OSError as e:
        raise missing_index_error(folder, cause=e) from e

    metadata, body = parse_front_matter(raw, index_path)
    validate_front_matter(metadata, index_path)

    return PostSource(folder=folder, date=date, slug=slug, front_matter=metadata, body=body)
