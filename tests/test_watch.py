# tests/test_watch.py
"""
Tests for watch.py - debounced rebuilds
"""
import threading

import pytest
from watchdog.events import DirModifiedEvent, FileClosedEvent, FileCreatedEvent, FileModifiedEvent

from mdbuild.errors import MdBuildError
from mdbuild.watch import ContentChangeHandler, safe_rebuild, watch


class Recorder:
    def __init__(self):
        self.calls = 0
        self.done = threading.Event()

    def __call__(self):
        self.calls += 1
        self.done.set()


class TestContentChangeHandler:

    def test_burst_triggers_one_rebuild(self):
        recorder = Recorder()
        handler = ContentChangeHandler(recorder, debounce=0.2)

        for name in ("index.md", "cover.png", "index.md"):
            handler.on_any_event(FileModifiedEvent(f"/posts/2021-01-01--a/{name}"))

        assert recorder.done.wait(5)
        assert recorder.calls == 1

    def test_created_file_triggers_rebuild(self):
        recorder = Recorder()
        handler = ContentChangeHandler(recorder, debounce=0.01)

        handler.on_any_event(FileCreatedEvent("/posts/2021-01-01--a/figure.png"))

        assert recorder.done.wait(5)

    def test_directory_events_are_ignored(self, mocker):
        handler = ContentChangeHandler(lambda: None, debounce=0.01)
        schedule = mocker.patch.object(handler, "schedule_rebuild")

        handler.on_any_event(DirModifiedEvent("/posts/2021-01-01--a"))

        schedule.assert_not_called()

    def test_closed_events_are_ignored(self, mocker):
        handler = ContentChangeHandler(lambda: None, debounce=0.01)
        schedule = mocker.patch.object(handler, "schedule_rebuild")

        handler.on_any_event(FileClosedEvent("/posts/2021-01-01--a/index.md"))

        schedule.assert_not_called()


class TestSafeRebuild:

    def test_build_error_is_logged(self, caplog):
        def failing():
            raise MdBuildError(message="cover missing")

        safe_rebuild(failing)()

        assert "cover missing" in caplog.text

    def test_other_errors_propagate(self):
        def broken():
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            safe_rebuild(broken)()


class TestWatch:

    def test_initial_build_then_stop(self, config):
        recorder = Recorder()
        stop = threading.Event()
        stop.set()

        watch(config, recorder, stop)

        assert recorder.calls == 1

    def test_missing_content_dir(self, config):
        config.content_dir = "nowhere"
        with pytest.raises(MdBuildError):
            watch(config, Recorder(), threading.Event())
