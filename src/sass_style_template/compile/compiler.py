"""Sass to CSS compilation backed by libsass."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import sass

from sass_style_template.config import CompilerOptions
from sass_style_template.errors import CompileError


class StyleCompiler(Protocol):
    """Turns one stylesheet source file into CSS text."""

    def __call__(self, source: Path) -> str: ...


class SassCompiler:
    """Compile ``.scss``/``.sass`` files with libsass."""

    def __init__(self, options: CompilerOptions) -> None:
        self._output_style = options.output_style
        self._include_paths = list(options.include_paths)

    def __call__(self, source: Path) -> str:
        # Sibling partials resolve relative to the source file's own directory.
        include_paths = [str(source.parent), *self._include_paths]
        try:
            css = sass.compile(
                filename=str(source),
                output_style=self._output_style,
                include_paths=include_paths,
            )
        except sass.CompileError as error:
            raise CompileError(str(error).strip(), path=source) from None
        except OSError as error:
            raise CompileError(
                f"Cannot read source: {error.strerror or error}", path=source
            ) from error
        return css
