"""
BrowseSession — read-only pager over a secret's versions.

Phases: initializing -> ready -> quit.

Versions arrive newest-first; index 0 is tagged ``[latest]``. Left/right
move between versions (clamped, no wraparound) and reset the scroll
position; vertical keys scroll within the displayed version.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from rich.text import Text
from textual import events as textual_events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from kvault.models import SecretVersion
from kvault.tui.events import Event, Key, Resize, key_name, scroll
from kvault.tui.render import Row, max_offset, number_lines, to_text, visible
from kvault.tui.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)

PANE_MARGIN = 4
CHROME_HEIGHT = 5  # border, footer, detail, help
WRAP_MARGIN = 8
MIN_WRAP_WIDTH = 20

PREV_KEYS = frozenset({"left", "h"})
NEXT_KEYS = frozenset({"right", "l"})
QUIT_KEYS = frozenset({"q", "escape", "ctrl+c"})

HELP_TEXT = "← → Navigate • ↑↓ Scroll • ESC/Q Quit"
EMPTY_TEXT = "No versions available."
LATEST_BADGE = "[latest]"


class BrowsePhase(StrEnum):
    INITIALIZING = "initializing"
    READY = "ready"
    QUIT = "quit"


@dataclass(frozen=True)
class BrowseState:
    versions: tuple[SecretVersion, ...]
    cursor: int = 0
    phase: BrowsePhase = BrowsePhase.INITIALIZING
    width: int = 0
    height: int = 0
    pane_width: int = 0
    pane_height: int = 0
    rows: tuple[Row, ...] = ()
    offset: int = 0

    @classmethod
    def from_versions(cls, versions: Sequence[SecretVersion]) -> BrowseState:
        return cls(versions=tuple(versions))

    @property
    def wrap_width(self) -> int:
        return max(self.pane_width - WRAP_MARGIN, MIN_WRAP_WIDTH)

    @property
    def current(self) -> SecretVersion | None:
        if not self.versions:
            return None
        return self.versions[self.cursor]

    @property
    def is_latest(self) -> bool:
        return bool(self.versions) and self.cursor == 0

    @property
    def done(self) -> bool:
        return self.phase == BrowsePhase.QUIT


def _rows_for(state: BrowseState) -> tuple[Row, ...]:
    current = state.current
    if current is None:
        return ()
    return tuple(number_lines(current.value, state.wrap_width))


def _relayout(state: BrowseState) -> BrowseState:
    rows = _rows_for(state)
    offset = min(state.offset, max_offset(len(rows), state.pane_height))
    return replace(state, rows=rows, offset=offset)


def transition(state: BrowseState, event: Event) -> BrowseState:
    """Apply one event. Quit absorbs everything."""
    if state.done:
        return state

    if isinstance(event, Resize):
        resized = replace(
            state,
            phase=BrowsePhase.READY,
            width=event.width,
            height=event.height,
            pane_width=event.width - PANE_MARGIN,
            pane_height=max(1, event.height - CHROME_HEIGHT),
        )
        return _relayout(resized)

    if state.phase != BrowsePhase.READY:
        return state

    key = event.name
    if key in QUIT_KEYS:
        return replace(state, phase=BrowsePhase.QUIT)
    if not state.versions:
        return state

    if key in PREV_KEYS or key in NEXT_KEYS:
        step = -1 if key in PREV_KEYS else 1
        cursor = min(max(state.cursor + step, 0), len(state.versions) - 1)
        if cursor == state.cursor:
            return state
        return _relayout(replace(state, cursor=cursor, offset=0))

    offset = scroll(state.offset, key, state.pane_height, max_offset(len(state.rows), state.pane_height))
    if offset is None:
        return state
    return replace(state, offset=offset)


def footer_text(secret_name: str, state: BrowseState) -> str:
    current = state.current
    if current is None:
        return f"{secret_name} • no versions"
    footer = f"{secret_name} • {current.short_id} ({state.cursor + 1}/{len(state.versions)})"
    if state.is_latest:
        footer += f" {LATEST_BADGE}"
    return footer


def body_text(state: BrowseState, theme: Theme = DEFAULT_THEME) -> Text:
    """The visible slice of the selected version, or the empty notice."""
    if state.current is None:
        return Text(EMPTY_TEXT, style=theme.footer)
    return to_text(visible(state.rows, state.offset, state.pane_height), theme)


def detail_text(version: SecretVersion | None) -> str:
    """One-line metadata summary: enabled flag, dates, tags."""
    if version is None:
        return ""
    parts = ["enabled" if version.enabled else "disabled"]
    if version.created_at is not None:
        parts.append(f"created {version.created_at.isoformat()}")
    if version.expires_at is not None:
        parts.append(f"expires {version.expires_at.isoformat()}")
    if version.tags:
        parts.append("tags " + ", ".join(f"{k}={v}" for k, v in sorted(version.tags.items())))
    return " • ".join(parts)


class BrowseApp(App[None]):
    """Page through a secret's versions, newest first."""

    TITLE = "kv — versions"

    BINDINGS = [
        Binding("ctrl+c", "interrupt", "Quit", show=False, priority=True),
    ]

    CSS = """
    #content {
        height: 1fr;
        border: round $accent;
        padding: 0 1;
        overflow: hidden hidden;
    }
    #footer, #detail, #help {
        height: 1;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        versions: Sequence[SecretVersion],
        secret_name: str,
        *,
        style_theme: Theme = DEFAULT_THEME,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.secret_name = secret_name
        self.style_theme = style_theme
        self._layout_ready = False
        self.state = BrowseState.from_versions(versions)

    def compose(self) -> ComposeResult:
        yield Static("", id="content")
        yield Static("", id="footer")
        yield Static("", id="detail")
        yield Static(HELP_TEXT, id="help")

    def on_mount(self) -> None:
        self.query_one("#content", Static).styles.border = ("round", self.style_theme.browse_border)
        for widget_id in ("#detail", "#help"):
            self.query_one(widget_id, Static).styles.color = self.style_theme.footer
        self._layout_ready = True
        self.apply_event(Resize(self.size.width, self.size.height))

    def on_resize(self, event: textual_events.Resize) -> None:
        if not self._layout_ready:
            return
        self.apply_event(Resize(event.size.width, event.size.height))

    def on_key(self, event: textual_events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.apply_event(Key(key_name(event)))

    def action_interrupt(self) -> None:
        self.apply_event(Key("ctrl+c"))

    def apply_event(self, event: Event) -> None:
        """Run one event through the state machine and redraw."""
        previous = self.state.cursor
        self.state = transition(self.state, event)
        if self.state.done:
            self.exit()
            return
        if self.state.cursor != previous:
            logger.debug("Showing version %d/%d", self.state.cursor + 1, len(self.state.versions))
        if self.state.phase == BrowsePhase.READY:
            self._redraw()

    def _footer(self) -> Text:
        current = self.state.current
        if current is None:
            return Text(footer_text(self.secret_name, self.state), style=self.style_theme.footer)
        footer = Text()
        footer.append(self.secret_name, style=self.style_theme.secret_name)
        footer.append(" • ", style=self.style_theme.footer)
        footer.append(current.short_id, style=self.style_theme.version)
        footer.append(f" ({self.state.cursor + 1}/{len(self.state.versions)})", style=self.style_theme.footer)
        if self.state.is_latest:
            footer.append(f" {LATEST_BADGE}", style=self.style_theme.latest_badge)
        return footer

    def _redraw(self) -> None:
        s = self.state
        self.query_one("#content", Static).update(body_text(s, self.style_theme))
        self.query_one("#footer", Static).update(self._footer())
        self.query_one("#detail", Static).update(Text(detail_text(s.current)))


def run_browse(
    versions: Sequence[SecretVersion],
    secret_name: str,
    *,
    style_theme: Theme = DEFAULT_THEME,
) -> None:
    """Block until the operator quits."""
    BrowseApp(versions, secret_name, style_theme=style_theme).run()
