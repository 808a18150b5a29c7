# tests/conftest.py
"""
Pytest configuration and shared fixtures for mdbuild tests
"""
import pytest
from pathlib import Path
from typing import Callable, Dict, List, Optional

from PIL import Image

from mdbuild.config_utils import MdBuildConfig
from mdbuild.context import PluginContext
from mdbuild.errors import MdBuildError, conversion_error


SAMPLE_INDEX = """---
title: "Hello"
category: "Test"
author: "A"
cover: "cover.png"
---

# Hello world

First post.
"""


def write_png(path: Path, size=(8, 6), color=(200, 40, 40, 255)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path, "PNG")
    return path


class FakeContext(PluginContext):
    """Records emitted files the way a bundler host would"""

    def __init__(self):
        self.assets: Dict[str, Dict] = {}
        self.chunks: Dict[str, str] = {}
        self._counter = 0

    def emit_file(self, type, name=None, id=None, source=None):
        self._counter += 1
        ref_id = f"ref{self._counter}"
        if type == "chunk":
            self.chunks[ref_id] = id
        else:
            self.assets[ref_id] = {"name": name, "source": source}
        return ref_id

    def set_asset_source(self, ref_id, source):
        if self.assets[ref_id]["source"] is not None:
            raise MdBuildError(message=f"source set twice for {ref_id}")
        self.assets[ref_id]["source"] = source

    def asset_names(self) -> List[str]:
        return sorted(a["name"] for a in self.assets.values())


class FakeEncoder:
    """Stand-in for PillowEncoder that records every call"""

    def __init__(self):
        self.calls = []

    def encode(self, source: Path, image_format: str) -> bytes:
        self.calls.append((Path(source).name, image_format))
        return f"{image_format}:{Path(source).name}".encode("utf-8")


class FailingEncoder(FakeEncoder):
    """FakeEncoder that refuses the given file names (or formats)"""

    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = set(fail_on)

    def encode(self, source: Path, image_format: str) -> bytes:
        if Path(source).name in self.fail_on or image_format in self.fail_on:
            self.calls.append((Path(source).name, image_format))
            raise conversion_error(Path(source), image_format)
        return super().encode(source, image_format)


@pytest.fixture
def fake_ctx() -> FakeContext:
    return FakeContext()


@pytest.fixture
def fake_encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    """Temporary project root with an empty content/posts directory"""
    root = tmp_path.resolve()
    (root / "content" / "posts").mkdir(parents=True)
    monkeypatch.chdir(root)
    # keep host environment from leaking into config
    for name in ("MDBUILD_CONTENT_DIR", "MDBUILD_OUT_DIR", "MDBUILD_CACHE_DIR", "MDBUILD_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    return root


@pytest.fixture
def config(project_dir: Path) -> MdBuildConfig:
    return MdBuildConfig(project_root=project_dir, base_url="https://example.com/")


@pytest.fixture
def make_post(project_dir: Path) -> Callable[..., Path]:
    """Factory creating content/posts/<dir_name>/ with index.md and a cover image"""

    def _make(dir_name: str = "2021-01-01--hello-world", index: Optional[str] = SAMPLE_INDEX,
              cover: Optional[str] = "cover.png") -> Path:
        folder = project_dir / "content" / "posts" / dir_name
        folder.mkdir(parents=True)
        if index is not None:
            (folder / "index.md").write_text(index, encoding="utf-8")
        if cover is not None:
            write_png(folder / cover)
        return folder

    return _make
