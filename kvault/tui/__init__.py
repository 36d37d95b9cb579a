"""
kvault TUI — Textual sessions for browsing versions and reviewing edits.

BrowseSession: single pane, page through versions, read-only.
ReviewSession: two panes (previous / new), confirm or cancel the edit.

Each session is a pure ``transition(state, event)`` state machine with a thin
Textual App around it.
"""

from __future__ import annotations
