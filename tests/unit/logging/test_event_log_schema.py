from __future__ import annotations

import json
from pathlib import Path

from sass_style_template.logging import JsonlEventLog, RenderEvent, utc_timestamp


def _event(source: str, ok: bool = True) -> RenderEvent:
    return RenderEvent(
        timestamp=utc_timestamp(),
        action="render",
        source=source,
        output=f"{source}.out" if ok else None,
        ok=ok,
        error_code=None if ok else "COMPILE_ERROR",
        message=None if ok else "boom",
    )


def test_event_is_one_sorted_json_object_per_line(tmp_path: Path) -> None:
    log = JsonlEventLog(tmp_path / "nested" / "events.jsonl")

    log.append(_event("a.scss"))
    log.append(_event("b.scss", ok=False))

    lines = log.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert list(first.keys()) == sorted(first.keys())
    assert set(first.keys()) == {
        "action",
        "error_code",
        "message",
        "ok",
        "output",
        "source",
        "timestamp",
    }
    assert first["timestamp"].endswith("Z")


def test_appends_keep_existing_lines(tmp_path: Path) -> None:
    path = tmp_path / "events.jsonl"
    path.write_text('{"action": "render"}\n', encoding="utf-8")

    JsonlEventLog(path).append(_event("a.scss", ok=False))

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == '{"action": "render"}'
    assert json.loads(lines[1])["error_code"] == "COMPILE_ERROR"
