# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
bundler.py - Minimal local host for the md-build plugin

Runs the plugin hooks, then assembles the output directory:
- assets are written to assets/<stem>-<sha256[:8]><ext>
- chunks (virtual modules) are written as <name>.js
- every import.meta.ROLLUP_FILE_URL_<ref> token in chunk source becomes
  a quoted relative path to the emitted file

Nothing is written unless every hook succeeds; the plugin writes
sitemap.xml itself at the end of a successful build_end.
"""

from __future__ import annotations

import hashlib
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from mdbuild.context import PluginContext
from mdbuild.errors import MdBuildError, unwritable_path_error
from mdbuild.string_utils import single_literal
from mdbuild.url_utils import FILE_URL_RE

logger = logging.getLogger(__name__)

ASSETS_DIR = "assets"


@dataclass
class EmittedFile:
    ref_id: str
    type: str
    name: Optional[str] = None
    module_id: Optional[str] = None
    source: Optional[bytes] = None
    file_name: Optional[str] = None


class LocalBundler(PluginContext):
    def __init__(self, out_dir: Path):
        self.out_dir = Path(out_dir)
        self.files: Dict[str, EmittedFile] = {}

    # ------------------------------------------------------------------
    # PluginContext
    # ------------------------------------------------------------------

    def emit_file(self, type, name=None, id=None, source=None):
        if type not in ("asset", "chunk"):
            raise ValueError(f"Unknown emitted file type: {type}")
        if type == "chunk" and not id:
            raise ValueError("Chunks need a module id")

        ref_id = uuid.uuid4().hex[:8]
        while ref_id in self.files:
            ref_id = uuid.uuid4().hex[:8]

        self.files[ref_id] = EmittedFile(
            ref_id=ref_id,
            type=type,
            name=name,
            module_id=id,
            source=bytes(source) if source is not None else None,
        )
        return ref_id

    def set_asset_source(self, ref_id, source):
        emitted = self.files.get(ref_id)
        if emitted is None or emitted.type != "asset":
            raise MdBuildError(message=f"No emitted asset with reference id {ref_id}")
        if emitted.source is not None:
            raise MdBuildError(
                message=f"Asset source set twice: {emitted.name}",
                context={"ref_id": ref_id}
            )
        emitted.source = bytes(source)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    async def run(self, plugin) -> List[Path]:
        """Run every hook of plugin and write the bundle; returns written paths."""
        try:
            await plugin.build_start(self)
            sources = self._load_chunks(plugin)
        except Exception as e:
            await plugin.build_end(self, e)
            raise

        await plugin.build_end(self)
        return self._write(sources)

    def _chunks(self) -> List[EmittedFile]:
        return [f for f in self.files.values() if f.type == "chunk"]

    def _assets(self) -> List[EmittedFile]:
        return [f for f in self.files.values() if f.type == "asset"]

    def _load_chunks(self, plugin) -> Dict[str, str]:
        sources = {}
        for chunk in self._chunks():
            module_id = plugin.resolve_id(self, chunk.module_id, None) or chunk.module_id
            source = plugin.load(self, module_id)
            if source is None:
                raise MdBuildError(
                    message=f"No plugin could load chunk {chunk.module_id}",
                    context={"module_id": chunk.module_id}
                )
            sources[chunk.ref_id] = source
        return sources

    def _assign_file_names(self) -> None:
        taken = set()

        def unique(candidate: str) -> str:
            suffix = Path(candidate).suffix
            base = candidate[:len(candidate) - len(suffix)]
            name, n = candidate, 1
            while name in taken:
                n += 1
                name = f"{base}-{n}{suffix}"
            taken.add(name)
            return name

        for asset in self._assets():
            if asset.source is None:
                raise MdBuildError(
                    message=f"Asset {asset.name} was emitted but never given content",
                    context={"ref_id": asset.ref_id}
                )
            name = Path(asset.name or asset.ref_id)
            digest = hashlib.sha256(asset.source).hexdigest()[:8]
            asset.file_name = unique(f"{ASSETS_DIR}/{name.stem}-{digest}{name.suffix}")

        for chunk in self._chunks():
            name = Path(chunk.module_id).name
            if not name.endswith(".js"):
                name = f"{name}.js"
            chunk.file_name = unique(name)

    def _resolve_file_urls(self, source: str) -> str:
        def replace(m):
            emitted = self.files.get(m.group("ref"))
            if emitted is None:
                raise MdBuildError(
                    message=f"Unknown file reference in generated module: {m.group(0)}",
                    context={"ref_id": m.group("ref")}
                )
            return single_literal(f"./{emitted.file_name}")

        return FILE_URL_RE.sub(replace, source)

    def _write(self, sources: Dict[str, str]) -> List[Path]:
        self._assign_file_names()
        written = []

        for asset in self._assets():
            written.append(self._write_file(asset.file_name, asset.source))

        for chunk in self._chunks():
            text = self._resolve_file_urls(sources[chunk.ref_id])
            written.append(self._write_file(chunk.file_name, text.encode("utf-8")))

        logger.info("Wrote %d file(s) to %s", len(written), self.out_dir)
        return written

    def _write_file(self, file_name: str, data: bytes) -> Path:
        target = self.out_dir / file_name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise unwritable_path_error(target, cause=e) from e
        return target
