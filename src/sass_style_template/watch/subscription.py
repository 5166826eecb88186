"""watchdog-backed filesystem subscription feeding the pipeline."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler, FileSystemMovedEvent
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from sass_style_template.watch.pipeline import WatchEvent, WatchPipeline

ObserverFactory = Callable[[], BaseObserver]


def _event_path(raw: str | bytes) -> Path:
    return Path(os.fsdecode(raw))


class PipelineEventHandler(FileSystemEventHandler):
    """Translate watchdog callbacks into pipeline events."""

    def __init__(self, pipeline: WatchPipeline) -> None:
        super().__init__()
        self._pipeline = pipeline

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._pipeline.handle_event(WatchEvent("change", _event_path(event.src_path)))

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._pipeline.handle_event(WatchEvent("add", _event_path(event.src_path)))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._pipeline.handle_event(WatchEvent("unlink", _event_path(event.src_path)))

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory or not isinstance(event, FileSystemMovedEvent):
            return
        self._pipeline.handle_event(
            WatchEvent(
                "move",
                _event_path(event.src_path),
                dest=_event_path(event.dest_path),
            )
        )


class WatchSession:
    """Persistent subscription over the pipeline's watch roots."""

    def __init__(
        self,
        pipeline: WatchPipeline,
        observer_factory: ObserverFactory = Observer,
    ) -> None:
        self._pipeline = pipeline
        self._observer = observer_factory()
        self._handler = PipelineEventHandler(pipeline)

    @property
    def observer(self) -> BaseObserver:
        return self._observer

    def start(self) -> None:
        """Schedule every watch root, then start delivering events."""
        for root in self._pipeline.globs.watch_roots():
            try:
                self._observer.schedule(self._handler, str(root.path), recursive=root.recursive)
            except OSError as error:
                self._pipeline.handle_event(
                    WatchEvent("error", root.path, message=f"Cannot watch {root.path}: {error}")
                )
        self._observer.start()
        self._pipeline.mark_watching()

    def run_forever(self, poll_seconds: float = 1.0) -> int:
        """Block until the observer thread exits; that exit is fatal."""
        while self._observer.is_alive():
            self._observer.join(poll_seconds)
        return 1

    def stop(self) -> None:
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join()
