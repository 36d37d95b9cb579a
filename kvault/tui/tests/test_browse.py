"""Tests for the browse session — pure transitions and Textual pilot tests."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from kvault.models import SecretVersion
from kvault.tui.browse import (
    EMPTY_TEXT,
    HELP_TEXT,
    BrowseApp,
    BrowsePhase,
    BrowseState,
    body_text,
    detail_text,
    footer_text,
    run_browse,
    transition,
)
from kvault.tui.events import Key, Resize


def _ready(versions, width=80, height=24):
    return transition(BrowseState.from_versions(versions), Resize(width, height))


class TestLayout:
    def test_resize(self, versions):
        state = _ready(versions, width=80, height=24)
        assert state.phase == BrowsePhase.READY
        assert state.pane_width == 76
        assert state.pane_height == 19
        assert state.wrap_width == 68
        assert [r.text for r in state.rows] == ["password=hunter3", "user=admin"]

    def test_minimum_wrap_width(self, versions):
        state = _ready(versions, width=10, height=3)
        assert state.wrap_width == 20
        assert state.pane_height == 1

    def test_keys_ignored_before_resize(self, versions):
        state = BrowseState.from_versions(versions)
        assert transition(state, Key("right")) is state


class TestNavigation:
    def test_next_and_previous(self, versions):
        state = _ready(versions)
        state = transition(state, Key("right"))
        assert state.cursor == 1
        assert state.rows[0].text == "password=hunter2"
        state = transition(state, Key("l"))
        assert state.cursor == 2
        state = transition(state, Key("h"))
        state = transition(state, Key("left"))
        assert state.cursor == 0

    def test_clamped_no_wraparound(self, versions):
        state = _ready(versions)
        assert transition(state, Key("left")).cursor == 0
        for _ in range(5):
            state = transition(state, Key("right"))
        assert state.cursor == 2

    def test_navigation_resets_scroll(self, versions, long_version):
        state = _ready([long_version, *versions])
        state = transition(state, Key("down"))
        state = transition(state, Key("down"))
        assert state.offset == 2
        state = transition(state, Key("right"))
        assert state.offset == 0

    def test_scroll_within_version(self, long_version):
        state = _ready([long_version], height=15)
        assert state.pane_height == 10
        state = transition(state, Key("pagedown"))
        assert state.offset == 10
        state = transition(state, Key("G"))
        assert state.offset == 40
        state = transition(state, Key("down"))
        assert state.offset == 40
        state = transition(state, Key("home"))
        assert state.offset == 0

    def test_short_value_does_not_scroll(self, versions):
        state = _ready(versions)
        assert transition(state, Key("down")).offset == 0

    @pytest.mark.parametrize("key", ["q", "escape", "ctrl+c"])
    def test_quit(self, versions, key):
        state = transition(_ready(versions), Key(key))
        assert state.phase == BrowsePhase.QUIT
        assert state.done

    def test_quit_absorbs_events(self, versions):
        state = transition(_ready(versions), Key("q"))
        assert transition(state, Key("right")) is state

    def test_unknown_key(self, versions):
        state = _ready(versions)
        assert transition(state, Key("z")) is state


class TestEmpty:
    def test_navigation_is_noop(self):
        state = _ready([])
        assert state.current is None
        assert transition(state, Key("right")) is state
        assert transition(state, Key("down")) is state

    def test_quit_still_works(self):
        assert transition(_ready([]), Key("q")).phase == BrowsePhase.QUIT

    def test_body_shows_notice(self):
        assert body_text(_ready([])).plain == EMPTY_TEXT == "No versions available."


class TestText:
    def test_footer_latest(self, versions):
        assert footer_text("db-password", _ready(versions)) == "db-password • c3c3c3c3 (1/3) [latest]"

    def test_footer_older(self, versions):
        state = transition(_ready(versions), Key("right"))
        assert footer_text("db-password", state) == "db-password • b2b2b2b2 (2/3)"

    def test_footer_empty(self):
        assert footer_text("db-password", _ready([])) == "db-password • no versions"

    def test_body_is_visible_slice(self, long_version):
        state = _ready([long_version], height=15)
        lines = body_text(state).plain.split("\n")
        assert len(lines) == 10
        assert lines[0] == "   1 │ line 1"

    def test_detail(self):
        version = SecretVersion(
            id="x",
            enabled=True,
            created_at=datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
            expires_at=datetime(2025, 3, 1, tzinfo=UTC),
            tags={"owner": "ops", "env": "prod"},
        )
        assert detail_text(version) == (
            "enabled • created 2024-03-01T12:00:00+00:00 • "
            "expires 2025-03-01T00:00:00+00:00 • tags env=prod, owner=ops"
        )

    def test_detail_minimal(self):
        assert detail_text(SecretVersion(id="x")) == "disabled"
        assert detail_text(None) == ""

    def test_help(self):
        assert HELP_TEXT == "← → Navigate • ↑↓ Scroll • ESC/Q Quit"


class TestBrowseApp:
    @pytest.mark.asyncio
    async def test_navigate_and_quit(self, versions):
        app = BrowseApp(versions, "db-password")
        async with app.run_test(size=(80, 24)) as pilot:
            assert app.state.phase == BrowsePhase.READY
            await pilot.press("right")
            assert app.state.cursor == 1
            await pilot.press("right", "right")
            assert app.state.cursor == 2
            await pilot.press("left")
            assert app.state.cursor == 1
            await pilot.press("q")
        assert app.state.phase == BrowsePhase.QUIT

    @pytest.mark.asyncio
    async def test_scroll(self, long_version):
        app = BrowseApp([long_version], "db-password")
        async with app.run_test(size=(80, 24)) as pilot:
            await pilot.press("down", "j")
            assert app.state.offset == 2
            await pilot.press("escape")
        assert app.state.done

    @pytest.mark.asyncio
    async def test_empty(self):
        app = BrowseApp([], "db-password")
        async with app.run_test(size=(80, 24)) as pilot:
            await pilot.press("right")
            assert app.state.phase == BrowsePhase.READY
            await pilot.press("ctrl+c")
        assert app.state.phase == BrowsePhase.QUIT


class TestRunBrowse:
    def test_runs_app(self, versions):
        with patch.object(BrowseApp, "run") as mock_run:
            run_browse(versions, "db-password")
        mock_run.assert_called_once_with()
