"""
Rendering primitives shared by the browse and review sessions.

wrap_line — greedy word wrap with a 20-column look-back for a space.
number_lines — numbered rows for a single secret value.
diff_rows — numbered rows with +/-/~ markers for one side of a diff.
to_text — turn rows into a rich Text using a Theme.

Rows are plain data so the state machines can be tested without a terminal.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from rich.text import Text

from kvault.diff import Classification, DiffLine, split_lines
from kvault.tui.theme import DEFAULT_THEME, Theme

FALLBACK_WIDTH = 40
BREAK_LOOKBACK = 20
GUTTER_WIDTH = 4
SEPARATOR = " │ "
CONTINUATION = "   "


class Side(StrEnum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Row:
    """One terminal row: line-number gutter, marker, wrapped text segment."""

    gutter: str
    marker: str
    text: str
    classification: Classification = Classification.UNCHANGED

    @property
    def plain(self) -> str:
        return f"{self.gutter}{self.marker}{self.text}"


def wrap_line(line: str, width: int) -> list[str]:
    """Wrap one line to ``width`` columns, preferring to break at a space."""
    if width <= 0:
        width = FALLBACK_WIDTH
    if len(line) <= width:
        return [line]

    wrapped: list[str] = []
    remaining = line
    while remaining:
        if len(remaining) <= width:
            wrapped.append(remaining)
            break

        break_point = width
        for i in range(width, max(width - BREAK_LOOKBACK, 0), -1):
            if i < len(remaining) and remaining[i] == " ":
                break_point = i
                break

        wrapped.append(remaining[:break_point])
        remaining = remaining[break_point:].lstrip(" ")

    return wrapped


def _gutter(number: int | None) -> str:
    return f"{number:>{GUTTER_WIDTH}}" if number is not None else " " * GUTTER_WIDTH


def number_lines(text: str, width: int) -> list[Row]:
    """Numbered rows for a secret value. An empty value still shows line 1."""
    rows: list[Row] = []
    for lineno, line in enumerate(split_lines(text) or [""], start=1):
        for i, segment in enumerate(wrap_line(line, width)):
            rows.append(Row(_gutter(lineno if i == 0 else None), SEPARATOR, segment))
    return rows


def _marker(line: DiffLine, side: Side) -> str:
    if side == Side.LEFT and line.classification == Classification.REMOVED:
        return " - "
    if side == Side.RIGHT and line.classification == Classification.ADDED:
        return " + "
    if side == Side.RIGHT and line.classification == Classification.CHANGED:
        return " ~ "
    return SEPARATOR


def diff_rows(lines: Sequence[DiffLine], width: int, side: Side) -> list[Row]:
    """Rows for one pane of the review. Placeholders render as a bare gutter."""
    rows: list[Row] = []
    for line in lines:
        if line.is_placeholder:
            rows.append(Row(_gutter(None), SEPARATOR, ""))
            continue
        for i, segment in enumerate(wrap_line(line.text, width)):
            if i == 0:
                rows.append(
                    Row(_gutter(line.source_line_number), _marker(line, side), segment, line.classification)
                )
            else:
                rows.append(Row(_gutter(None), CONTINUATION, segment, line.classification))
    return rows


def max_offset(row_count: int, height: int) -> int:
    return max(0, row_count - max(height, 1))


def visible(rows: Sequence[Row], offset: int, height: int) -> Sequence[Row]:
    return rows[offset : offset + max(height, 0)]


def to_text(rows: Sequence[Row], theme: Theme = DEFAULT_THEME) -> Text:
    """Style rows into a single rich Text, one row per line."""
    text = Text(no_wrap=True, overflow="crop")
    for n, row in enumerate(rows):
        if n:
            text.append("\n")
        text.append(row.gutter, style=theme.line_number)
        if row.classification == Classification.REMOVED:
            style = theme.removed
        elif row.classification in (Classification.ADDED, Classification.CHANGED):
            style = theme.added
        else:
            style = theme.unchanged
        text.append(row.marker, style=style if row.marker.strip() not in ("", "│") else "")
        text.append(row.text, style=style)
    return text
