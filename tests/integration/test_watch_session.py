from __future__ import annotations

import io
import time
from pathlib import Path

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from sass_style_template.compile import SassCompiler, VendorPrefixer
from sass_style_template.config import CompilerOptions, default_settings
from sass_style_template.logging import ConsoleReporter
from sass_style_template.watch import PipelineState, WatchPipeline, WatchSession


class FakeObserver:
    def __init__(self) -> None:
        self.scheduled: list[tuple[str, bool]] = []
        self.handler = None
        self.started = False
        self.stopped = False

    def schedule(self, handler: object, path: str, recursive: bool = False) -> None:
        self.handler = handler
        self.scheduled.append((path, recursive))

    def start(self) -> None:
        self.started = True

    def is_alive(self) -> bool:
        return False

    def join(self, timeout: float | None = None) -> None:
        return None

    def stop(self) -> None:
        self.stopped = True


def _pipeline(root: Path) -> tuple[WatchPipeline, io.StringIO, io.StringIO]:
    out = io.StringIO()
    err = io.StringIO()
    pipeline = WatchPipeline(
        options=default_settings("export default css`<% content %>`;\n").pipeline,
        compiler=SassCompiler(CompilerOptions(output_style="compressed", include_paths=())),
        post_processor=VendorPrefixer(),
        reporter=ConsoleReporter(out=out, err=err),
        root=root,
    )
    return pipeline, out, err


def test_session_schedules_roots_and_enters_watching(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    pipeline, _, _ = _pipeline(tmp_path)
    pipeline.initialize()
    observer = FakeObserver()

    session = WatchSession(pipeline, observer_factory=lambda: observer)
    session.start()

    assert observer.started
    assert observer.scheduled == [(str(tmp_path), False), (str(tmp_path / "src"), True)]
    assert pipeline.state is PipelineState.WATCHING
    assert session.run_forever(poll_seconds=0) == 1


def test_handler_translates_watchdog_events(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    pipeline, _, err = _pipeline(tmp_path)
    pipeline.initialize()
    observer = FakeObserver()
    WatchSession(pipeline, observer_factory=lambda: observer).start()
    handler = observer.handler
    assert handler is not None

    source = src / "card.scss"
    source.write_text(".card{color:#123456}", encoding="utf-8")
    handler.dispatch(FileCreatedEvent(str(source)))
    handler.dispatch(DirModifiedEvent(str(src)))
    handler.dispatch(FileModifiedEvent(str(source)))

    output = src / "card-styles.css.js"
    assert ".card{color:#123456}" in output.read_text(encoding="utf-8")

    renamed = src / "panel.scss"
    source.replace(renamed)
    handler.dispatch(FileMovedEvent(str(source), str(renamed)))
    assert not output.exists()
    assert pipeline.tracked_files == (renamed,)

    renamed.unlink()
    handler.dispatch(FileDeletedEvent(str(renamed)))
    assert pipeline.tracked_files == ()
    assert err.getvalue() == ""


def test_real_observer_picks_up_changes(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    source = src / "card.scss"
    source.write_text(".card{color:#111111}", encoding="utf-8")
    pipeline, _, _ = _pipeline(tmp_path)
    pipeline.initialize()
    output = src / "card-styles.css.js"
    assert "#111111" in output.read_text(encoding="utf-8")

    session = WatchSession(pipeline)
    session.start()
    try:
        time.sleep(0.5)
        source.write_text(".card{color:#222222}", encoding="utf-8")
        deadline = time.monotonic() + 10
        while time.monotonic() < deadline:
            if "#222222" in output.read_text(encoding="utf-8"):
                break
            time.sleep(0.1)
    finally:
        session.stop()

    assert "#222222" in output.read_text(encoding="utf-8")
