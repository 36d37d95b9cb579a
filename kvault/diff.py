"""
Positional line diff for the edit review.

Lines are aligned strictly by index: line ``i`` of the old text is compared
with line ``i`` of the new text. There is no minimal-edit-distance alignment,
so a moved line or content that shifted position is not detected. Any
insertion or deletion before the end of a sequence cascades into "changed"
markers for every subsequent line. Secret values are short and edited by
hand, and the review output must stay exactly this shape; do not replace
this with an LCS-based alignment.

Cost is O(n) in the number of lines. There is no character-level highlighting.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Classification(StrEnum):
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    ADDED = "added"
    CHANGED = "changed"


@dataclass(frozen=True)
class DiffLine:
    """One position in one pane of the review.

    ``source_line_number`` is None for a placeholder: the position exists
    on the other side only.
    """

    source_line_number: int | None
    text: str
    classification: Classification = Classification.UNCHANGED

    @property
    def is_placeholder(self) -> bool:
        return self.source_line_number is None


PLACEHOLDER = DiffLine(source_line_number=None, text="")


@dataclass(frozen=True)
class DiffSummary:
    """Counts shown in the review footer."""

    changed: int = 0
    added: int = 0
    removed: int = 0

    @property
    def empty(self) -> bool:
        return not (self.changed or self.added or self.removed)

    def describe(self) -> str:
        if self.empty:
            return "no changes"
        parts = []
        if self.changed:
            parts.append(f"{self.changed} changed")
        if self.added:
            parts.append(f"{self.added} added")
        if self.removed:
            parts.append(f"{self.removed} removed")
        return ", ".join(parts)


def split_lines(text: str) -> list[str]:
    """Split on LF only. A final newline ends the last line; CRLF counts as LF."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def compare(old_text: str, new_text: str) -> tuple[list[DiffLine], list[DiffLine]]:
    """Compare two texts line by line. Returns (left, right) of equal length."""
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)

    left: list[DiffLine] = []
    right: list[DiffLine] = []

    for i in range(max(len(old_lines), len(new_lines))):
        has_old = i < len(old_lines)
        has_new = i < len(new_lines)
        lineno = i + 1

        if has_old and has_new:
            old = old_lines[i]
            new = new_lines[i]
            if old == new:
                left.append(DiffLine(lineno, old, Classification.UNCHANGED))
                right.append(DiffLine(lineno, new, Classification.UNCHANGED))
            else:
                left.append(DiffLine(lineno, old, Classification.REMOVED))
                # An empty old line gaining content counts as an addition.
                kind = Classification.CHANGED if old != "" else Classification.ADDED
                right.append(DiffLine(lineno, new, kind))
        elif has_new:
            left.append(PLACEHOLDER)
            right.append(DiffLine(lineno, new_lines[i], Classification.ADDED))
        else:
            left.append(DiffLine(lineno, old_lines[i], Classification.REMOVED))
            right.append(PLACEHOLDER)

    return left, right


def summarize(left: list[DiffLine], right: list[DiffLine]) -> DiffSummary:
    """Count positions by what happened to them.

    A replaced line counts once, as changed or added; removed counts only
    old lines with nothing opposite them.
    """
    return DiffSummary(
        changed=sum(1 for line in right if line.classification == Classification.CHANGED),
        added=sum(1 for line in right if line.classification == Classification.ADDED),
        removed=sum(
            1
            for old, new in zip(left, right)
            if old.classification == Classification.REMOVED and new.is_placeholder
        ),
    )
