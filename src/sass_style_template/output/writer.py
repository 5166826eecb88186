"""Atomic output writes and stale output removal."""

from __future__ import annotations

from pathlib import Path

from sass_style_template.errors import DeleteFailure, WriteFailure
from sass_style_template.logging import ConsoleReporter


class OutputWriter:
    """Writes rendered files and deletes outputs whose source disappeared."""

    def __init__(self, reporter: ConsoleReporter) -> None:
        self._reporter = reporter

    def write(self, path: Path, content: str, suppress_notification: bool = False) -> None:
        """Replace ``path`` with ``content`` via a sibling temp file."""
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            with tmp.open("w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            tmp.replace(path)
        except OSError as error:
            tmp.unlink(missing_ok=True)
            raise WriteFailure(
                f"Cannot write {path}: {error.strerror or error}", path=path
            ) from error
        if not suppress_notification:
            self._reporter.reload(path)

    def remove(self, path: Path) -> bool:
        """Delete ``path`` if present; return whether a file was removed."""
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as error:
            raise DeleteFailure(
                f"Cannot remove {path}: {error.strerror or error}", path=path
            ) from error
        self._reporter.removed(path)
        return True
