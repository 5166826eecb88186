"""Output path derivation for compiled stylesheets."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from sass_style_template.config import PipelineOptions
from sass_style_template.errors import InvalidDestination

STYLESHEET_EXTENSIONS = (".scss", ".sass", ".css")
FRAGMENT_PREFIX = "_"
STYLES_SUFFIX = "-styles"


@dataclass(slots=True, frozen=True)
class OutputDescriptor:
    """Where a source file's rendered output lives."""

    directory: Path
    base_name: str
    extension: str

    @property
    def path(self) -> Path:
        """Return the full output file path."""
        return self.directory / f"{self.base_name}{self.extension}"


def is_fragment(source: Path) -> bool:
    """Return True for import-only partials such as ``_mixins.scss``."""
    return source.name.startswith(FRAGMENT_PREFIX)


def output_base_name(source: Path) -> str:
    """Strip the stylesheet extension from a source file name."""
    if source.suffix.lower() in STYLESHEET_EXTENSIONS:
        return source.stem
    return source.name


def output_extension(options: PipelineOptions) -> str:
    """Build ``<suffix><ext>`` for the configured output flavor."""
    suffix = "" if options.omit_suffix else STYLES_SUFFIX
    if options.emit_css_file:
        return f"{suffix}.css"
    return f"{suffix}.css.{options.code_file_extension}"


def clean_destination(destination: str) -> str:
    """Strip exactly one leading and one trailing path separator."""
    cleaned = destination
    if cleaned.startswith(os.sep):
        cleaned = cleaned[1:]
    if cleaned.endswith(os.sep):
        cleaned = cleaned[:-1]
    return cleaned


def prepare_destination(destination: str, root: Path | None = None) -> Path:
    """Create the cleaned destination directory and return it resolved.

    A relative destination is taken relative to ``root``, or to the working
    directory when no root is given.
    """
    cleaned = clean_destination(destination)
    if not cleaned:
        raise InvalidDestination(f"Destination '{destination}' is empty after cleaning.")
    target = Path(cleaned) if root is None else root / cleaned
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise InvalidDestination(
            f"Cannot create destination '{cleaned}': {error.strerror or error}", path=target
        ) from error
    if not target.is_dir():
        raise InvalidDestination(f"Destination '{cleaned}' is not a directory.", path=target)
    return target.resolve()


def resolve_output(
    source: Path, options: PipelineOptions, root: Path | None = None
) -> OutputDescriptor:
    """Derive the output descriptor for one source file."""
    if options.destination_dir:
        directory = prepare_destination(options.destination_dir, root)
    else:
        directory = source.parent
    return OutputDescriptor(
        directory=directory,
        base_name=output_base_name(source),
        extension=output_extension(options),
    )
