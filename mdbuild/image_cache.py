# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
image_cache.py - Persistent cache of converted images

Entries are keyed by "<source stem>.<format>" and stored as plain files
in the cache directory (default <cwd>/.cache). Deleting the directory
forces every image to be converted again.

NOTE: keys carry no content hash or mtime. Replacing a source image
without renaming it keeps serving the stale conversion until the cache
directory is cleared.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Optional

from mdbuild.errors import BuildIOError, unwritable_path_error
from mdbuild.fs_utils import atomic_write_bytes, list_files

logger = logging.getLogger(__name__)


def cache_key(source: Path, image_format: str) -> str:
    """'photos/cover.png' + 'webp' -> 'cover.webp'"""
    return f"{Path(source).stem}.{image_format}"


class ImageCache:
    """
    Write-through cache: get(key) -> bytes | None, put(key, data).

    Files already on disk are indexed by load() at build start and read
    lazily on first get(). Safe to call from worker threads.
    """

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)
        self._data: Dict[str, bytes] = {}
        self._on_disk: Dict[str, Path] = {}
        self._lock = threading.Lock()

    def load(self) -> int:
        """Create the cache directory if needed and index existing entries."""
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise unwritable_path_error(self.cache_dir, cause=e) from e

        count = 0
        for name in list_files(self.cache_dir):
            # dot files are in-flight temp files from atomic writes
            if name.startswith("."):
                continue
            with self._lock:
                self._on_disk[name] = self.cache_dir / name
            count += 1

        logger.debug("Indexed %d cached image(s) in %s", count, self.cache_dir)
        return count

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data or key in self._on_disk

    def __len__(self) -> int:
        with self._lock:
            return len(set(self._data) | set(self._on_disk))

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            data = self._data.get(key)
            path = self._on_disk.get(key)
        if data is not None:
            return data
        if path is None:
            return None

        try:
            data = path.read_bytes()
        except OSError as e:
            raise BuildIOError(
                message=f"Cannot read cached image {key}",
                suggestion=f"Delete {self.cache_dir} to force re-conversion",
                context={"path": str(path)},
                cause=e
            ) from e

        with self._lock:
            self._data[key] = data
        return data

    def put(self, key: str, data: bytes) -> None:
        path = self.cache_dir / key
        atomic_write_bytes(path, data)
        with self._lock:
            self._data[key] = data
            self._on_disk[key] = path
