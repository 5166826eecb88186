"""Output naming, content injection and writing."""

from .injector import CONTENT_PLACEHOLDER, fill_template, render_content, replace_marker_block
from .paths import (
    OutputDescriptor,
    clean_destination,
    is_fragment,
    output_base_name,
    output_extension,
    prepare_destination,
    resolve_output,
)
from .writer import OutputWriter

__all__ = [
    "CONTENT_PLACEHOLDER",
    "OutputDescriptor",
    "OutputWriter",
    "clean_destination",
    "fill_template",
    "is_fragment",
    "output_base_name",
    "output_extension",
    "prepare_destination",
    "render_content",
    "replace_marker_block",
    "resolve_output",
]
