"""Deterministic glob resolution and watch root derivation."""

from __future__ import annotations

import glob
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final

_MAGIC: Final[re.Pattern[str]] = re.compile(r"[*?[]")


@dataclass(slots=True, frozen=True)
class WatchRoot:
    """A directory to subscribe to and whether to descend into it."""

    path: Path
    recursive: bool


def normalize_path(path: str | os.PathLike[str], root: Path) -> Path:
    """Absolute, lexically normalized path without resolving symlinks."""
    return Path(os.path.normpath(os.path.join(root, os.fspath(path))))


class GlobTracker:
    """Resolves the configured pattern list to an ordered set of files."""

    def __init__(self, patterns: tuple[str, ...], root: Path) -> None:
        self._patterns = patterns
        self._root = Path(os.path.abspath(root))

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self) -> tuple[Path, ...]:
        """Return matches in pattern order, each pattern's hits sorted."""
        seen: set[Path] = set()
        output: list[Path] = []
        for pattern in self._patterns:
            matches = glob.glob(pattern, root_dir=self._root, recursive=True)
            for match in sorted(matches):
                path = normalize_path(match, self._root)
                if path in seen or not path.is_file():
                    continue
                seen.add(path)
                output.append(path)
        return tuple(output)

    def watch_roots(self) -> tuple[WatchRoot, ...]:
        """Derive the directories a filesystem subscription must cover."""
        roots: dict[Path, bool] = {}
        for pattern in self._patterns:
            root = self._root_for(pattern)
            roots[root.path] = roots.get(root.path, False) or root.recursive

        ordered = sorted(roots.items(), key=lambda item: (len(item[0].parts), str(item[0])))
        output: list[WatchRoot] = []
        for path, recursive in ordered:
            if any(
                parent.recursive and path.is_relative_to(parent.path) for parent in output
            ):
                continue
            output.append(WatchRoot(path=path, recursive=recursive))
        return tuple(output)

    def _root_for(self, pattern: str) -> WatchRoot:
        parts = Path(pattern).parts
        literal: list[str] = []
        for part in parts:
            if _MAGIC.search(part):
                break
            literal.append(part)
        has_magic = len(literal) < len(parts)
        if not has_magic and literal:
            literal.pop()
        # Magic before the final component means matches can live in subdirectories.
        recursive = len(literal) < len(parts) - 1
        base = normalize_path(os.path.join(*literal) if literal else ".", self._root)
        while not base.is_dir():
            if base.parent == base:
                break
            base = base.parent
            recursive = True
        return WatchRoot(path=base, recursive=recursive)
