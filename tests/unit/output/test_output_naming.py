from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from sass_style_template.config import default_settings
from sass_style_template.errors import InvalidDestination
from sass_style_template.output import (
    clean_destination,
    is_fragment,
    output_base_name,
    output_extension,
    prepare_destination,
    resolve_output,
)

OPTIONS = default_settings("<% content %>").pipeline


@pytest.mark.parametrize(
    ("css_file", "wo_suffix", "js_file", "expected"),
    [
        (False, False, "js", "-styles.css.js"),
        (False, True, "js", ".css.js"),
        (False, False, "ts", "-styles.css.ts"),
        (False, True, "ts", ".css.ts"),
        (True, False, "js", "-styles.css"),
        (True, True, "js", ".css"),
        (True, False, "ts", "-styles.css"),
        (True, True, "ts", ".css"),
    ],
)
def test_extension_matrix(css_file: bool, wo_suffix: bool, js_file: str, expected: str) -> None:
    options = replace(
        OPTIONS, emit_css_file=css_file, omit_suffix=wo_suffix, code_file_extension=js_file
    )
    assert output_extension(options) == expected


def test_base_name_strips_stylesheet_extension_only() -> None:
    assert output_base_name(Path("src/button.scss")) == "button"
    assert output_base_name(Path("src/legacy.sass")) == "legacy"
    assert output_base_name(Path("src/theme.dark.scss")) == "theme.dark"
    assert output_base_name(Path("src/README")) == "README"


def test_fragment_detection_uses_base_name() -> None:
    assert is_fragment(Path("src/_partial.scss"))
    assert not is_fragment(Path("_src/partial.scss"))


def test_output_lives_beside_source_without_destination(tmp_path: Path) -> None:
    source = tmp_path / "src" / "a.scss"
    descriptor = resolve_output(source, OPTIONS)

    assert descriptor.directory == tmp_path / "src"
    assert descriptor.path == tmp_path / "src" / "a-styles.css.js"


@pytest.mark.parametrize("destination", ["/out/", "out", "/out", "out/"])
def test_destination_variants_resolve_to_same_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, destination: str
) -> None:
    monkeypatch.chdir(tmp_path)
    options = replace(OPTIONS, destination_dir=destination)

    descriptor = resolve_output(tmp_path / "src" / "a.scss", options)

    assert descriptor.directory == (tmp_path / "out").resolve()
    assert descriptor.directory.is_dir()


def test_clean_destination_strips_one_separator_each_side() -> None:
    assert clean_destination("/build/css/") == "build/css"
    assert clean_destination("//build//") == "/build/"


def test_prepare_destination_is_idempotent(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    first = prepare_destination("nested/out")
    second = prepare_destination("nested/out")

    assert first == second == (tmp_path / "nested" / "out").resolve()


def test_prepare_destination_fails_when_blocked_by_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "blocker").write_text("", encoding="utf-8")

    with pytest.raises(InvalidDestination) as error:
        prepare_destination("blocker/out")

    assert error.value.code == "INVALID_DESTINATION"


def test_shared_destination_collapses_same_named_sources(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    options = replace(OPTIONS, destination_dir="out")

    first = resolve_output(tmp_path / "a" / "x.scss", options)
    second = resolve_output(tmp_path / "b" / "x.scss", options)

    assert first.path == second.path


def test_relative_destination_is_anchored_at_root(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(tmp_path)
    options = replace(OPTIONS, destination_dir="/out/")

    descriptor = resolve_output(root / "src" / "a.scss", options, root)

    assert descriptor.directory == (root / "out").resolve()
    assert not (tmp_path / "out").exists()
