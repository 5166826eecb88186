"""Rule-table vendor prefixing for compiled CSS."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final, Protocol

from sass_style_template.errors import PostProcessError

DEFAULT_PROPERTY_PREFIXES: Final[Mapping[str, tuple[str, ...]]] = {
    "appearance": ("-webkit-", "-moz-"),
    "backdrop-filter": ("-webkit-",),
    "box-decoration-break": ("-webkit-",),
    "hyphens": ("-webkit-", "-ms-"),
    "mask": ("-webkit-",),
    "mask-image": ("-webkit-",),
    "print-color-adjust": ("-webkit-",),
    "tab-size": ("-moz-", "-o-"),
    "text-size-adjust": ("-webkit-", "-moz-", "-ms-"),
    "user-select": ("-webkit-", "-moz-", "-ms-"),
}
DEFAULT_VALUE_PREFIXES: Final[Mapping[tuple[str, str], tuple[str, ...]]] = {
    ("position", "sticky"): ("-webkit-sticky",),
}

_QUOTES: Final[frozenset[str]] = frozenset("\"'")
_DECLARATION: Final[re.Pattern[str]] = re.compile(
    r"^(?P<indent>\s*)(?P<prop>-?[A-Za-z][A-Za-z0-9-]*)(?P<sep>\s*:\s*)(?P<value>.*?)\s*$",
    re.DOTALL,
)


class CssPostProcessor(Protocol):
    """Transforms compiled CSS text into final CSS text."""

    def __call__(self, css: str) -> str: ...


class VendorPrefixer:
    """Insert vendor-prefixed copies ahead of declarations that need them."""

    def __init__(
        self,
        property_prefixes: Mapping[str, tuple[str, ...]] | None = None,
        value_prefixes: Mapping[tuple[str, str], tuple[str, ...]] | None = None,
    ) -> None:
        self._property_prefixes = (
            DEFAULT_PROPERTY_PREFIXES if property_prefixes is None else property_prefixes
        )
        self._value_prefixes = DEFAULT_VALUE_PREFIXES if value_prefixes is None else value_prefixes

    def __call__(self, css: str) -> str:
        # One buffer per open block; only innermost blocks hold declarations.
        buffers: list[list[str]] = [[]]
        has_children: list[bool] = [False]
        start = index = 0
        while index < len(css):
            char = css[index]
            if char in _QUOTES:
                index = _string_end(css, index)
                continue
            if css.startswith("/*", index):
                index = _comment_end(css, index)
                continue
            if char == "{":
                buffers[-1].append(css[start : index + 1])
                has_children[-1] = True
                buffers.append([])
                has_children.append(False)
                start = index = index + 1
                continue
            if char == "}":
                if len(buffers) == 1:
                    raise PostProcessError("Unbalanced braces in compiled CSS.")
                buffers[-1].append(css[start:index])
                body = "".join(buffers.pop())
                if not has_children.pop():
                    body = self._prefix_block(body)
                buffers[-1].append(body + "}")
                start = index = index + 1
                continue
            index += 1
        if len(buffers) != 1:
            raise PostProcessError("Unbalanced braces in compiled CSS.")
        buffers[0].append(css[start:])
        return "".join(buffers[0])

    def _prefix_block(self, body: str) -> str:
        segments = _split_declarations(body)
        parsed = [_DECLARATION.match(segment) for segment in segments]
        present_props = {match.group("prop").lower() for match in parsed if match}
        present_pairs = {
            (match.group("prop").lower(), match.group("value").strip().lower())
            for match in parsed
            if match
        }

        output: list[str] = []
        for segment, match in zip(segments, parsed):
            if match is None:
                output.append(segment)
                continue
            indent = match.group("indent")
            prop = match.group("prop")
            sep = match.group("sep")
            value = match.group("value")
            name = prop.lower()
            for prefix in self._property_prefixes.get(name, ()):
                if f"{prefix}{name}" not in present_props:
                    output.append(f"{indent}{prefix}{name}{sep}{value}")
            for prefixed_value in self._value_prefixes.get((name, value.strip().lower()), ()):
                if (name, prefixed_value) not in present_pairs:
                    output.append(f"{indent}{prop}{sep}{prefixed_value}")
            output.append(segment)
        return ";".join(output)


def _string_end(text: str, start: int) -> int:
    """Return the index just past the quoted string opening at ``start``."""
    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        index += 1
    raise PostProcessError("Unterminated string in compiled CSS.")


def _comment_end(text: str, start: int) -> int:
    end = text.find("*/", start + 2)
    if end < 0:
        raise PostProcessError("Unterminated comment in compiled CSS.")
    return end + 2


def _split_declarations(body: str) -> list[str]:
    """Split a block body on ``;`` outside strings, comments and parentheses."""
    segments: list[str] = []
    depth = 0
    start = index = 0
    while index < len(body):
        char = body[index]
        if char in _QUOTES:
            index = _string_end(body, index)
            continue
        if body.startswith("/*", index):
            index = _comment_end(body, index)
            continue
        if char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif char == ";" and depth == 0:
            segments.append(body[start:index])
            start = index + 1
        index += 1
    segments.append(body[start:])
    return segments
