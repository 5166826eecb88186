from __future__ import annotations

from pathlib import Path

from sass_style_template.config import bundled_template, load_effective_settings, load_template
from sass_style_template.output import CONTENT_PLACEHOLDER


def test_bundled_template_has_one_placeholder() -> None:
    template = bundled_template()

    assert len(CONTENT_PLACEHOLDER.findall(template)) == 1
    assert "export default css`" in template


def test_custom_template_in_cwd_wins(tmp_path: Path) -> None:
    (tmp_path / ".sass-template.tmpl").write_text("custom <% content %>\n", encoding="utf-8")

    assert load_template(tmp_path) == "custom <% content %>\n"
    assert load_effective_settings(tmp_path).pipeline.fallback_template == "custom <% content %>\n"


def test_missing_custom_template_falls_back(tmp_path: Path) -> None:
    assert load_template(tmp_path) == bundled_template()
