"""
clean.py - Remove the image cache and generated output

Keeps index.html and robots.txt in the output directory; everything
else there is generated by the build.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, List

from mdbuild.errors import BuildIOError

logger = logging.getLogger(__name__)

KEEP_FILES = ("index.html", "robots.txt")


def is_safe_path(base_dir: Path, target_path: Path) -> bool:
    """True if target_path resolves inside base_dir (and is not base_dir itself)."""
    base_resolved = base_dir.resolve()
    target_resolved = target_path.resolve()
    if target_resolved == base_resolved:
        return False
    try:
        target_resolved.relative_to(base_resolved)
        return True
    except ValueError:
        return False


def _remove(path: Path, dry_run: bool) -> None:
    logger.info("%s %s", "Would remove" if dry_run else "Removing", path)
    if dry_run:
        return
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def clean_outputs(
    project_root: Path,
    cache_dir: Path,
    out_dir: Path,
    keep: Iterable[str] = KEEP_FILES,
    dry_run: bool = False,
) -> List[Path]:
    """
    Delete cache_dir and the generated contents of out_dir.

    Raises:
        BuildIOError: if either directory lies outside project_root
    """
    for directory in (cache_dir, out_dir):
        if not is_safe_path(project_root, directory):
            raise BuildIOError(
                message=f"Refusing to clean a directory outside the project root: {directory}",
                context={"project_root": str(project_root), "directory": str(directory)}
            )

    keep = set(keep)
    removed = []

    if cache_dir.exists():
        _remove(cache_dir, dry_run)
        removed.append(cache_dir)

    if out_dir.is_dir():
        for entry in sorted(out_dir.iterdir()):
            if entry.is_file() and entry.name in keep:
                continue
            _remove(entry, dry_run)
            removed.append(entry)

    return removed
