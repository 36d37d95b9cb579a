"""
Session events and the shared vertical-scroll key table.

Textual key events are reduced to plain key names (``key_name``) so the
state machines never see a Textual object.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# key -> (kind, amount). kind: "line" / "page" move by amount, "home"/"end" jump.
SCROLL_KEYS: dict[str, tuple[str, int]] = {
    "up": ("line", -1),
    "k": ("line", -1),
    "down": ("line", 1),
    "j": ("line", 1),
    "pageup": ("page", -1),
    "ctrl+b": ("page", -1),
    "b": ("page", -1),
    "pagedown": ("page", 1),
    "ctrl+f": ("page", 1),
    "f": ("page", 1),
    "space": ("page", 1),
    "home": ("home", 0),
    "g": ("home", 0),
    "end": ("end", 0),
    "G": ("end", 0),
}


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Key:
    name: str


Event = Resize | Key


def scroll(offset: int, key: str, page: int, limit: int) -> int | None:
    """New offset for a scroll key, clamped to [0, limit]. None if not a scroll key."""
    if key not in SCROLL_KEYS:
        return None
    kind, amount = SCROLL_KEYS[key]
    if kind == "line":
        target = offset + amount
    elif kind == "page":
        target = offset + amount * max(page, 1)
    elif kind == "home":
        target = 0
    else:
        target = limit
    return min(max(target, 0), limit)


def key_name(event: Any) -> str:
    """Reduce a Textual Key event to a name: printable characters as-is, else the key."""
    char = getattr(event, "character", None)
    if char and len(char) == 1 and char.isprintable() and not char.isspace():
        return char
    return str(event.key)
