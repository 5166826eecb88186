"""Human-readable console diagnostics."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.markup import escape

from sass_style_template.errors import RenderError


def _console(stream: TextIO | None, stderr: bool) -> Console:
    # Paths and compiler messages are printed verbatim: no wrapping or highlighting.
    return Console(file=stream, stderr=stderr, highlight=False, emoji=False, soft_wrap=True)


class ConsoleReporter:
    """Writes success lines to ``out`` and failures to ``err``."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = _console(out, stderr=False)
        self._err = _console(err, stderr=True)

    def reload(self, path: Path) -> None:
        self._out.print(f"[green]reload:[/green] {escape(str(path))}")

    def removed(self, path: Path) -> None:
        self._out.print(f"[yellow]removed:[/yellow] {escape(str(path))}")

    def info(self, message: str) -> None:
        self._out.print(f"[blue]==>[/blue] {escape(message)}")

    def failure(self, error: RenderError, source: Path | None = None) -> None:
        """Report a per-file failure with its error code."""
        location = source or error.path
        detail = f"{location}: {error.message}" if location is not None else error.message
        self.error(error.code, detail)

    def error(self, code: str, message: str) -> None:
        self._err.print(f"[red]{escape(code)}:[/red] {escape(message)}")
