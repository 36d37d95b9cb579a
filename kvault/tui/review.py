"""
ReviewSession — two-pane diff review that collects a confirm/cancel decision.

Phases: initializing -> ready -> confirmed | cancelled.

``transition(state, event)`` is pure. ReviewApp feeds it Textual resize and
key events, renders the visible slice of each pane, and exits with the
Decision once a terminal phase is reached. The panes are locked in vertical
sync: scrolling moves the left pane and the right pane follows.
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
from textual.containers import Horizontal, Vertical
from textual.widgets import Static

from kvault.diff import DiffLine, DiffSummary, compare, summarize
from kvault.tui.events import Event, Key, Resize, key_name, scroll
from kvault.tui.render import Row, Side, diff_rows, max_offset, to_text, visible
from kvault.tui.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)

PANE_MARGIN = 4  # border + padding per pane
CHROME_HEIGHT = 6  # titles, pane borders, footer, help
WRAP_MARGIN = 10

CONFIRM_KEYS = frozenset({"y", "Y", "enter"})
CANCEL_KEYS = frozenset({"n", "N", "escape", "q", "ctrl+c"})

HELP_TEXT = "↑↓ Scroll • Y/Enter Confirm • N/ESC Cancel"
WHITESPACE_ONLY_TEXT = "whitespace or line endings changed"


class ReviewPhase(StrEnum):
    INITIALIZING = "initializing"
    READY = "ready"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Decision(StrEnum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


TERMINAL_PHASES = frozenset({ReviewPhase.CONFIRMED, ReviewPhase.CANCELLED})


@dataclass(frozen=True)
class ReviewState:
    left: tuple[DiffLine, ...]
    right: tuple[DiffLine, ...]
    phase: ReviewPhase = ReviewPhase.INITIALIZING
    width: int = 0
    height: int = 0
    pane_width: int = 0
    pane_height: int = 0
    left_rows: tuple[Row, ...] = ()
    right_rows: tuple[Row, ...] = ()
    left_offset: int = 0
    right_offset: int = 0

    @classmethod
    def from_diff(cls, left: Sequence[DiffLine], right: Sequence[DiffLine]) -> ReviewState:
        return cls(left=tuple(left), right=tuple(right))

    @property
    def wrap_width(self) -> int:
        return self.pane_width - WRAP_MARGIN

    @property
    def done(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def decision(self) -> Decision | None:
        if self.phase == ReviewPhase.CONFIRMED:
            return Decision.CONFIRMED
        if self.phase == ReviewPhase.CANCELLED:
            return Decision.CANCELLED
        return None


def _layout(state: ReviewState, width: int, height: int) -> ReviewState:
    pane_width = width // 2 - PANE_MARGIN
    pane_height = max(1, height - CHROME_HEIGHT)
    wrap = pane_width - WRAP_MARGIN
    left_rows = tuple(diff_rows(state.left, wrap, Side.LEFT))
    right_rows = tuple(diff_rows(state.right, wrap, Side.RIGHT))
    left_offset = min(state.left_offset, max_offset(len(left_rows), pane_height))
    return replace(
        state,
        phase=ReviewPhase.READY,
        width=width,
        height=height,
        pane_width=pane_width,
        pane_height=pane_height,
        left_rows=left_rows,
        right_rows=right_rows,
        left_offset=left_offset,
        right_offset=min(left_offset, max_offset(len(right_rows), pane_height)),
    )


def transition(state: ReviewState, event: Event) -> ReviewState:
    """Apply one event. Terminal phases absorb everything."""
    if state.done:
        return state

    if isinstance(event, Resize):
        return _layout(state, event.width, event.height)

    if state.phase != ReviewPhase.READY:
        return state

    key = event.name
    if key in CONFIRM_KEYS:
        return replace(state, phase=ReviewPhase.CONFIRMED)
    if key in CANCEL_KEYS:
        return replace(state, phase=ReviewPhase.CANCELLED)

    left_offset = scroll(
        state.left_offset,
        key,
        state.pane_height,
        max_offset(len(state.left_rows), state.pane_height),
    )
    if left_offset is None:
        return state
    right_offset = min(left_offset, max_offset(len(state.right_rows), state.pane_height))
    return replace(state, left_offset=left_offset, right_offset=right_offset)


def footer_text(secret_name: str, summary: DiffSummary, *, differs: bool = False) -> str:
    """Footer summary. ``differs`` flags byte changes the line diff cannot show."""
    if summary.empty and differs:
        return f"Secret: {secret_name} • {WHITESPACE_ONLY_TEXT}"
    return f"Secret: {secret_name} • {summary.describe()}"


class ReviewApp(App[Decision]):
    """Side-by-side review of previous vs. edited secret value."""

    TITLE = "kv — review changes"

    BINDINGS = [
        Binding("ctrl+c", "interrupt", "Cancel", show=False, priority=True),
    ]

    CSS = """
    #panes {
        height: 1fr;
    }
    .column {
        width: 1fr;
        height: 1fr;
    }
    .pane-title {
        height: 1;
        padding: 0 1;
    }
    .pane {
        height: 1fr;
        border: round $accent;
        padding: 0 1;
        overflow: hidden hidden;
    }
    #footer, #help {
        height: 1;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        old_value: str,
        new_value: str,
        secret_name: str,
        *,
        style_theme: Theme = DEFAULT_THEME,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        left, right = compare(old_value, new_value)
        self.secret_name = secret_name
        self.style_theme = style_theme
        self._layout_ready = False
        self.summary = summarize(left, right)
        self.differs = old_value != new_value
        self.state = ReviewState.from_diff(left, right)

    def compose(self) -> ComposeResult:
        with Horizontal(id="panes"):
            with Vertical(classes="column"):
                yield Static(
                    Text("Previous Version", style=self.style_theme.left_title),
                    id="left-title",
                    classes="pane-title",
                )
                yield Static("", id="left-pane", classes="pane")
            with Vertical(classes="column"):
                yield Static(
                    Text("New Version", style=self.style_theme.right_title),
                    id="right-title",
                    classes="pane-title",
                )
                yield Static("", id="right-pane", classes="pane")
        yield Static(Text(footer_text(self.secret_name, self.summary, differs=self.differs)), id="footer")
        yield Static(HELP_TEXT, id="help")

    def on_mount(self) -> None:
        self.query_one("#left-pane", Static).styles.border = ("round", self.style_theme.left_border)
        self.query_one("#right-pane", Static).styles.border = ("round", self.style_theme.right_border)
        for widget_id in ("#footer", "#help"):
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
        self.state = transition(self.state, event)
        decision = self.state.decision
        if decision is not None:
            logger.debug("Review finished: %s", decision)
            self.exit(decision)
            return
        if self.state.phase == ReviewPhase.READY:
            self._redraw()

    def _redraw(self) -> None:
        s = self.state
        self.query_one("#left-pane", Static).update(
            to_text(visible(s.left_rows, s.left_offset, s.pane_height), self.style_theme)
        )
        self.query_one("#right-pane", Static).update(
            to_text(visible(s.right_rows, s.right_offset, s.pane_height), self.style_theme)
        )

    @property
    def confirmed(self) -> bool:
        return self.state.phase == ReviewPhase.CONFIRMED

    @property
    def cancelled(self) -> bool:
        return self.state.phase == ReviewPhase.CANCELLED


def run_review(
    old_value: str,
    new_value: str,
    secret_name: str,
    *,
    style_theme: Theme = DEFAULT_THEME,
) -> Decision:
    """Block until the operator confirms or cancels. Anything else counts as cancel."""
    app = ReviewApp(old_value, new_value, secret_name, style_theme=style_theme)
    result = app.run()
    return result if result is not None else Decision.CANCELLED
