#!/usr/bin/env python3

"""
fs_utils.py - Shared filesystem helpers for mdbuild

Directory listings come back in filesystem enumeration order. Callers
must not depend on that order for correctness.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import List

from mdbuild.errors import missing_content_root_error, unwritable_path_error


def _scan(base_dir: Path) -> List[os.DirEntry]:
    try:
        with os.scandir(base_dir) as entries:
            return list(entries)
    except OSError as e:
        raise missing_content_root_error(Path(base_dir), cause=e) from e


def list_subdirectories(base_dir: Path) -> List[str]:
    """Names of the immediate subdirectories of base_dir."""
    return [entry.name for entry in _scan(base_dir) if entry.is_dir()]


def list_files(base_dir: Path) -> List[str]:
    """Names of the immediate non-directory entries of base_dir."""
    return [entry.name for entry in _scan(base_dir) if not entry.is_dir()]


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """
    Write data to path so readers only ever see the old or the new file.

    The bytes go to a dot-prefixed temp file in the same directory, which
    is then renamed over the target. Concurrent writers of identical
    content simply replace each other.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise unwritable_path_error(path, cause=e) from e

    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise unwritable_path_error(path, cause=e) from e
