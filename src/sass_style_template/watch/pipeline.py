"""Watch-compile-inject orchestration."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from pathlib import Path

from sass_style_template.compile import CssPostProcessor, StyleCompiler
from sass_style_template.config import PipelineOptions
from sass_style_template.errors import DeleteFailure, PostProcessError, RenderError
from sass_style_template.logging import ConsoleReporter, JsonlEventLog, RenderEvent, utc_timestamp
from sass_style_template.output import (
    OutputDescriptor,
    OutputWriter,
    is_fragment,
    render_content,
    resolve_output,
)
from sass_style_template.watch.globs import GlobTracker, normalize_path


class PipelineState(enum.Enum):
    INITIALIZING = "initializing"
    WATCHING = "watching"


@dataclass(slots=True, frozen=True)
class WatchEvent:
    """Filesystem notification normalized for the pipeline.

    ``kind`` is one of ``change``, ``add``, ``unlink``, ``move`` or
    ``error``. ``dest`` is only set for ``move``.
    """

    kind: str
    path: Path | None = None
    dest: Path | None = None
    message: str | None = None


@dataclass(slots=True, frozen=True)
class SweepResult:
    """Per-file outcome of one sweep over the tracked set."""

    rendered: tuple[Path, ...]
    failed: tuple[Path, ...]
    skipped: tuple[Path, ...]


class WatchPipeline:
    """Owns the tracked source set and the source -> output mapping."""

    def __init__(
        self,
        options: PipelineOptions,
        compiler: StyleCompiler,
        post_processor: CssPostProcessor,
        reporter: ConsoleReporter,
        root: Path,
        writer: OutputWriter | None = None,
        event_log: JsonlEventLog | None = None,
    ) -> None:
        self._options = options
        self._compiler = compiler
        self._post_processor = post_processor
        self._reporter = reporter
        self._writer = writer or OutputWriter(reporter)
        self._event_log = event_log
        self._globs = GlobTracker(options.glob_patterns, root)
        self._glob_files: tuple[Path, ...] = ()
        self._last_outputs: dict[Path, OutputDescriptor] = {}
        self._state = PipelineState.INITIALIZING
        # Reentrant: event handlers call sweep() while holding it.
        self._lock = threading.RLock()

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def globs(self) -> GlobTracker:
        return self._globs

    @property
    def tracked_files(self) -> tuple[Path, ...]:
        return self._glob_files

    def output_for(self, source: Path) -> OutputDescriptor | None:
        """Return the last descriptor recorded for a source file."""
        return self._last_outputs.get(normalize_path(source, self._globs.root))

    def initialize(self) -> SweepResult:
        """Resolve the glob set once and render every matched file."""
        with self._lock:
            self.refresh_globs()
            return self.sweep()

    def mark_watching(self) -> None:
        self._state = PipelineState.WATCHING

    def refresh_globs(self) -> tuple[Path, ...]:
        """Re-resolve the whole pattern list."""
        with self._lock:
            self._glob_files = self._globs.resolve()
            return self._glob_files

    def sweep(self) -> SweepResult:
        """Render every tracked file; failures stay scoped to their file."""
        rendered: list[Path] = []
        failed: list[Path] = []
        skipped: list[Path] = []
        with self._lock:
            for source in self._glob_files:
                if is_fragment(source):
                    skipped.append(source)
                    continue
                try:
                    output = self.render_file(source)
                except RenderError as error:
                    failed.append(source)
                    self._reporter.failure(error, source)
                    self._log("render", source, error=error)
                    continue
                except Exception as error:
                    failed.append(source)
                    self._reporter.error("INTERNAL_ERROR", f"{source}: {error}")
                    self._log("render", source, code="INTERNAL_ERROR", message=str(error))
                    continue
                rendered.append(source)
                self._log("render", source, output=output)
        return SweepResult(
            rendered=tuple(rendered),
            failed=tuple(failed),
            skipped=tuple(skipped),
        )

    def render_file(self, source: Path) -> Path | None:
        """Run compile -> postprocess -> resolve -> inject -> write for one file."""
        source = normalize_path(source, self._globs.root)
        if is_fragment(source):
            return None
        options = self._options
        css = self._compiler(source)
        try:
            css = self._post_processor(css)
        except PostProcessError as error:
            raise PostProcessError(error.message, path=source) from None
        descriptor = resolve_output(source, options, self._globs.root)
        with self._lock:
            self._last_outputs[source] = descriptor
            output_path = descriptor.path
            content = render_content(css, output_path, options)
            self._writer.write(output_path, content, options.suppress_notification)
        return output_path

    def remove_output(self, source: Path) -> bool:
        """Delete the output last rendered for a vanished source file."""
        source = normalize_path(source, self._globs.root)
        with self._lock:
            descriptor = self._last_outputs.pop(source, None)
            if descriptor is None:
                return False
            try:
                removed = self._writer.remove(descriptor.path)
            except DeleteFailure as error:
                self._reporter.failure(error, source)
                self._log("remove", source, output=descriptor.path, error=error)
                return False
            if removed:
                self._log("remove", source, output=descriptor.path)
            return removed

    def handle_event(self, event: WatchEvent) -> None:
        """Dispatch one filesystem event; nothing raised here ends the session."""
        try:
            with self._lock:
                self._dispatch(event)
        except Exception as error:
            self._reporter.error("WATCHER_ERROR", f"{type(error).__name__}: {error}")

    def _dispatch(self, event: WatchEvent) -> None:
        if event.kind == "error":
            self._reporter.error("WATCHER_ERROR", event.message or "unknown watcher error")
            return
        if event.path is None:
            return
        path = normalize_path(event.path, self._globs.root)
        if event.kind == "change":
            if path in self._glob_files:
                self.sweep()
            return
        if event.kind == "add":
            self.refresh_globs()
            return
        if event.kind == "unlink":
            self._unlink(path)
            return
        if event.kind == "move":
            dest = normalize_path(event.dest, self._globs.root) if event.dest else None
            replaced_tracked = dest is not None and dest in self._glob_files
            self._unlink(path)
            if replaced_tracked:
                self.sweep()
            return
        raise ValueError(f"Unknown watch event kind: {event.kind}")

    def _unlink(self, path: Path) -> None:
        was_tracked = path in self._glob_files
        self.refresh_globs()
        if was_tracked or path in self._last_outputs:
            self.remove_output(path)

    def _log(
        self,
        action: str,
        source: Path,
        output: Path | None = None,
        error: RenderError | None = None,
        code: str | None = None,
        message: str | None = None,
    ) -> None:
        if self._event_log is None:
            return
        if error is not None:
            code = error.code
            message = error.message
        self._event_log.append(
            RenderEvent(
                timestamp=utc_timestamp(),
                action=action,
                source=str(source),
                output=str(output) if output is not None else None,
                ok=code is None,
                error_code=code,
                message=message,
            )
        )
