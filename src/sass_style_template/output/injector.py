"""Marker-block replacement and fallback template materialization."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

from sass_style_template.config import PipelineOptions
from sass_style_template.errors import MarkerNotFound, TemplateMalformed

CONTENT_PLACEHOLDER: Final[re.Pattern[str]] = re.compile(r"<%\s*content\s*%>")


def replace_marker_block(existing: str, css: str, marker_start: str, marker_end: str) -> str:
    """Replace everything after the first start marker with fresh CSS.

    Text up to and including ``marker_start`` is kept verbatim. Whatever
    followed it in the old file is dropped, and ``marker_end`` plus a
    newline are appended.
    """
    position = existing.find(marker_start)
    if position < 0:
        raise MarkerNotFound(f'Marker start "{marker_start}" not found in file.')
    head = existing[: position + len(marker_start)]
    return f"{head}{css}{marker_end}\n"


def fill_template(template: str, css: str) -> str:
    """Substitute the first ``<% content %>`` placeholder with CSS."""
    if CONTENT_PLACEHOLDER.search(template) is None:
        raise TemplateMalformed("Fallback template has no <% content %> placeholder.")
    return CONTENT_PLACEHOLDER.sub(lambda _match: css, template, count=1)


def render_content(css: str, output_path: Path, options: PipelineOptions) -> str:
    """Produce the final file content for one output path."""
    if options.emit_css_file:
        return css
    if output_path.is_file():
        existing = output_path.read_text(encoding="utf-8")
        try:
            return replace_marker_block(existing, css, options.marker_start, options.marker_end)
        except MarkerNotFound as error:
            raise MarkerNotFound(error.message, path=output_path) from None
    try:
        return fill_template(options.fallback_template, css)
    except TemplateMalformed as error:
        raise TemplateMalformed(error.message, path=output_path) from None
