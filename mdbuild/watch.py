#!/usr/bin/env python3
"""
# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

watch.py (mdbuild)

- Watches the content root (index.md files, images, new post folders).
- After a burst of changes settles for `watch_debounce` seconds, runs a
  full rebuild. Each rebuild gets a fresh plugin; the image cache on disk
  keeps repeat conversions cheap.
- A failed rebuild is logged and the watcher keeps running.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import PatternMatchingEventHandler
from watchdog.observers import Observer

from mdbuild.config_utils import MdBuildConfig
from mdbuild.errors import MdBuildError

logger = logging.getLogger(__name__)


class ContentChangeHandler(PatternMatchingEventHandler):
    def __init__(self, rebuild: Callable[[], None], debounce: float):
        super().__init__(
            patterns=["*"],
            ignore_patterns=["*/.*", "*~", "*.swp"],  # editor temp files
            ignore_directories=True,
            case_sensitive=False,
        )
        self.rebuild = rebuild
        self.debounce = debounce
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._running = False

    def _debounced_run(self):
        with self._lock:
            if self._running:
                logger.debug("Rebuild already running, skipping")
                return
            self._running = True
        try:
            self.rebuild()
        finally:
            with self._lock:
                self._running = False

    def schedule_rebuild(self, src_path: str):
        with self._lock:
            if self._timer is None:
                logger.info("Change detected: %s", src_path)
            else:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self):
        with self._lock:
            self._timer = None
        self._debounced_run()

    def on_any_event(self, event):
        if event.is_directory:
            return
        if event.event_type not in ("created", "modified", "moved", "deleted"):
            return
        self.schedule_rebuild(str(event.src_path))


def safe_rebuild(build: Callable[[], object]) -> Callable[[], None]:
    """Wrap build so a failing rebuild is reported instead of stopping the watcher."""
    def run():
        try:
            build()
        except MdBuildError as e:
            logger.error("Rebuild failed:%s", e)
    return run


def watch(config: MdBuildConfig, build: Callable[[], object], stop: Optional[threading.Event] = None) -> None:
    """Run build once, then again after every settled burst of changes until stopped."""
    content_dir = Path(config.content_path)
    if not content_dir.is_dir():
        raise MdBuildError(message=f"Content directory not found: {content_dir}")

    rebuild = safe_rebuild(build)
    handler = ContentChangeHandler(rebuild, config.watch_debounce)
    observer = Observer()
    observer.schedule(handler, str(content_dir), recursive=True)
    observer.start()
    logger.info("Watching %s (Ctrl+C to stop)", content_dir)

    rebuild()

    stop = stop or threading.Event()
    try:
        while not stop.wait(1):
            pass
    except KeyboardInterrupt:
        logger.info("Stopping...")
    finally:
        observer.stop()
        observer.join()
