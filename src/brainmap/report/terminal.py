"""Terminal size and output helpers."""

from __future__ import annotations

from rich.console import Console

from brainmap.report.markup import to_rich_text


def terminal_columns() -> int:
    """Current terminal width in columns (rich falls back to 80)."""
    return Console().width


def write_lines(console: Console, lines: list[str]) -> None:
    """Print markup lines without letting rich re-wrap them."""
    for line in lines:
        console.print(to_rich_text(line), soft_wrap=True)
