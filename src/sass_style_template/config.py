"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import TypeVar

CONFIG_FILE_NAME = "sass_template.toml"
CUSTOM_TEMPLATE_NAME = ".sass-template.tmpl"

DEFAULT_MARKER_START = "export default css`"
DEFAULT_MARKER_END = "`;"
DEFAULT_CUSTOM_GLOB = "./*.scss,./src/**/*.scss"
DEFAULT_JS_FILE = "js"
DEFAULT_OUTPUT_STYLE = "expanded"
OUTPUT_STYLES = ("nested", "expanded", "compact", "compressed")

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class PipelineOptions:
    """Immutable per-run options for the watch-compile-inject pipeline."""

    marker_start: str
    marker_end: str
    glob_patterns: tuple[str, ...]
    emit_css_file: bool
    omit_suffix: bool
    code_file_extension: str
    destination_dir: str | None
    fallback_template: str
    suppress_notification: bool


@dataclass(slots=True, frozen=True)
class CompilerOptions:
    """Stylesheet compiler settings."""

    output_style: str
    include_paths: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class Settings:
    """Fully merged runtime configuration."""

    pipeline: PipelineOptions
    compiler: CompilerOptions
    event_log: Path | None

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for diagnostics."""
        return {
            "markers": {
                "start": self.pipeline.marker_start,
                "end": self.pipeline.marker_end,
            },
            "sources": {"globs": list(self.pipeline.glob_patterns)},
            "output": {
                "css_file": self.pipeline.emit_css_file,
                "wo_suffix": self.pipeline.omit_suffix,
                "js_file": self.pipeline.code_file_extension,
                "destination": self.pipeline.destination_dir,
                "hide_reload": self.pipeline.suppress_notification,
            },
            "compiler": {
                "output_style": self.compiler.output_style,
                "include_paths": list(self.compiler.include_paths),
            },
            "logging": {
                "event_log": str(self.event_log) if self.event_log is not None else None,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    marker_start: str | None = None
    marker_end: str | None = None
    custom_glob: str | None = None
    css_file: bool | None = None
    wo_suffix: bool | None = None
    js_file: str | None = None
    destination: str | None = None
    hide_reload: bool | None = None
    output_style: str | None = None
    include_paths: tuple[str, ...] | None = None
    event_log: Path | None = None


def split_glob(custom_glob: str) -> tuple[str, ...]:
    """Split a comma-joined glob list, dropping blank entries."""
    return tuple(part.strip() for part in custom_glob.split(",") if part.strip())


def default_settings(template: str) -> Settings:
    """Build default settings around an already loaded fallback template."""
    return Settings(
        pipeline=PipelineOptions(
            marker_start=DEFAULT_MARKER_START,
            marker_end=DEFAULT_MARKER_END,
            glob_patterns=split_glob(DEFAULT_CUSTOM_GLOB),
            emit_css_file=False,
            omit_suffix=False,
            code_file_extension=DEFAULT_JS_FILE,
            destination_dir=None,
            fallback_template=template,
            suppress_notification=False,
        ),
        compiler=CompilerOptions(output_style=DEFAULT_OUTPUT_STYLE, include_paths=()),
        event_log=None,
    )


def bundled_template() -> str:
    """Return the default fallback template shipped with the package."""
    return (
        resources.files("sass_style_template")
        .joinpath("templates/sass-template.tmpl")
        .read_text(encoding="utf-8")
    )


def load_template(cwd: Path) -> str:
    """Load the user template from cwd, falling back to the bundled one."""
    custom = cwd / CUSTOM_TEMPLATE_NAME
    if custom.is_file():
        return custom.read_text(encoding="utf-8")
    return bundled_template()


def load_config_file(cwd: Path) -> dict[str, object]:
    """Load optional sass_template.toml from the working directory."""
    config_path = cwd / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_str(table: dict[str, object], section: str, field: str, default: str) -> str:
    if field not in table:
        return default
    value = table[field]
    if not isinstance(value, str):
        raise ValueError(f"Config field '{section}.{field}' must be a string.")
    return value


def _optional_bool(table: dict[str, object], section: str, field: str, default: bool) -> bool:
    if field not in table:
        return default
    value = table[field]
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{section}.{field}' must be a boolean.")
    return value


def merge_config(
    base: Settings, file_payload: dict[str, object], overrides: CliOverrides
) -> Settings:
    """Merge defaults, config file, then CLI overrides."""
    markers = _get_table(file_payload, "markers")
    sources = _get_table(file_payload, "sources")
    output = _get_table(file_payload, "output")
    compiler = _get_table(file_payload, "compiler")
    logging_payload = _get_table(file_payload, "logging")

    glob_patterns = base.pipeline.glob_patterns
    if "globs" in sources:
        glob_patterns = tuple(
            item.strip()
            for item in _tuple_of_strings(sources["globs"], "sources", "globs")
            if item.strip()
        )

    destination = base.pipeline.destination_dir
    if "destination" in output:
        destination = _optional_str(output, "output", "destination", "") or None

    include_paths = base.compiler.include_paths
    if "include_paths" in compiler:
        include_paths = _tuple_of_strings(compiler["include_paths"], "compiler", "include_paths")

    event_log = base.event_log
    if "event_log" in logging_payload:
        raw_event_log = _optional_str(logging_payload, "logging", "event_log", "")
        event_log = Path(raw_event_log) if raw_event_log else None

    merged = Settings(
        pipeline=PipelineOptions(
            marker_start=_optional_str(markers, "markers", "start", base.pipeline.marker_start),
            marker_end=_optional_str(markers, "markers", "end", base.pipeline.marker_end),
            glob_patterns=glob_patterns,
            emit_css_file=_optional_bool(output, "output", "css_file", base.pipeline.emit_css_file),
            omit_suffix=_optional_bool(output, "output", "wo_suffix", base.pipeline.omit_suffix),
            code_file_extension=_optional_str(
                output, "output", "js_file", base.pipeline.code_file_extension
            ),
            destination_dir=destination,
            fallback_template=base.pipeline.fallback_template,
            suppress_notification=_optional_bool(
                output, "output", "hide_reload", base.pipeline.suppress_notification
            ),
        ),
        compiler=CompilerOptions(
            output_style=_optional_str(
                compiler, "compiler", "output_style", base.compiler.output_style
            ),
            include_paths=include_paths,
        ),
        event_log=event_log,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(settings: Settings, overrides: CliOverrides) -> Settings:
    """Apply startup overrides at highest precedence and validate the result."""
    pipeline = settings.pipeline
    glob_patterns = pipeline.glob_patterns
    if overrides.custom_glob is not None:
        glob_patterns = split_glob(overrides.custom_glob)

    merged = Settings(
        pipeline=PipelineOptions(
            marker_start=_pick(overrides.marker_start, pipeline.marker_start),
            marker_end=_pick(overrides.marker_end, pipeline.marker_end),
            glob_patterns=glob_patterns,
            emit_css_file=_pick(overrides.css_file, pipeline.emit_css_file),
            omit_suffix=_pick(overrides.wo_suffix, pipeline.omit_suffix),
            code_file_extension=_pick(overrides.js_file, pipeline.code_file_extension),
            destination_dir=_pick(overrides.destination, pipeline.destination_dir) or None,
            fallback_template=pipeline.fallback_template,
            suppress_notification=_pick(overrides.hide_reload, pipeline.suppress_notification),
        ),
        compiler=CompilerOptions(
            output_style=_pick(overrides.output_style, settings.compiler.output_style),
            include_paths=_pick(overrides.include_paths, settings.compiler.include_paths),
        ),
        event_log=_pick(overrides.event_log, settings.event_log),
    )
    validate_settings(merged)
    return merged


def validate_settings(settings: Settings) -> None:
    """Reject option combinations the pipeline cannot honor."""
    pipeline = settings.pipeline
    if not pipeline.emit_css_file:
        if not pipeline.marker_start:
            raise ValueError("Config field 'markers.start' must not be empty.")
        if not pipeline.marker_end:
            raise ValueError("Config field 'markers.end' must not be empty.")
        if not pipeline.fallback_template:
            raise ValueError("A fallback template is required unless css_file is set.")
        if not pipeline.code_file_extension:
            raise ValueError("Config field 'output.js_file' must not be empty.")
    if settings.compiler.output_style not in OUTPUT_STYLES:
        raise ValueError(
            f"Config field 'compiler.output_style' must be one of {', '.join(OUTPUT_STYLES)}."
        )


def load_effective_settings(cwd: Path, overrides: CliOverrides | None = None) -> Settings:
    """Load settings using merge order defaults -> config file -> overrides."""
    resolved = cwd.resolve()
    base = default_settings(load_template(resolved))
    payload = load_config_file(resolved)
    return merge_config(base, payload, overrides or CliOverrides())


def _pick(override: T | None, current: T) -> T:
    return current if override is None else override
