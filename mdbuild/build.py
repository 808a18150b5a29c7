# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
build.py - One build invocation: plugin + local bundler on a fresh event loop
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from mdbuild.bundler import LocalBundler
from mdbuild.config_utils import MdBuildConfig
from mdbuild.models import PostMetadata
from mdbuild.plugin import MdBuild

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    posts: List[PostMetadata] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    seconds: float = 0.0


async def build_async(config: MdBuildConfig) -> BuildReport:
    started = time.monotonic()
    plugin = MdBuild(config)
    bundler = LocalBundler(config.out_path)
    written = await bundler.run(plugin)
    return BuildReport(posts=plugin.posts, written=written, seconds=time.monotonic() - started)


def run_build(config: MdBuildConfig) -> BuildReport:
    """Run a complete build; any MdBuildError aborts it."""
    report = asyncio.run(build_async(config))
    logger.info(
        "Built %d post(s), %d file(s) in %.1fs",
        len(report.posts), len(report.written), report.seconds
    )
    return report
