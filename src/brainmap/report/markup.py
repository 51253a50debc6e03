"""Inline ``<fg=COLOR;options=bold>text</>`` markup helpers."""

from __future__ import annotations

import re

from rich.style import Style
from rich.text import Text

_MARKUP = re.compile(r"<(?P<spec>(?:fg|bg|options)=[^<>]*)>|</>")


def styled(text: str, fg: str | None = None, *, bg: str | None = None, bold: bool = False) -> str:
    """Wrap ``text`` in a style directive; plain text when no style is given."""

    parts: list[str] = []
    if fg:
        parts.append(f"fg={fg}")
    if bg:
        parts.append(f"bg={bg}")
    if bold:
        parts.append("options=bold")
    if not parts:
        return text
    return f"<{';'.join(parts)}>{text}</>"


def strip_markup(text: str) -> str:
    return _MARKUP.sub("", text)


def visible_len(text: str) -> int:
    """Length of ``text`` as shown on a terminal, markup excluded."""
    return len(strip_markup(text))


def to_rich_text(text: str) -> Text:
    """Convert a markup line into a ``rich`` ``Text`` with the same styling."""

    output = Text()
    stack: list[Style] = []
    position = 0
    for match in _MARKUP.finditer(text):
        if match.start() > position:
            output.append(text[position : match.start()], style=_current(stack))
        spec = match.group("spec")
        if spec is None:
            if stack:
                stack.pop()
        else:
            stack.append(_parse_spec(spec))
        position = match.end()
    if position < len(text):
        output.append(text[position:], style=_current(stack))
    return output


def _parse_spec(spec: str) -> Style:
    color = bgcolor = None
    bold = None
    for item in spec.split(";"):
        key, _, value = item.partition("=")
        if key == "fg":
            color = value
        elif key == "bg":
            bgcolor = value
        elif key == "options" and "bold" in value.split(","):
            bold = True
    return Style(color=color, bgcolor=bgcolor, bold=bold)


def _current(stack: list[Style]) -> Style:
    return Style.combine(stack) if stack else Style()
