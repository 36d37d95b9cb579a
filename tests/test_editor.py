"""Tests for kvault.editor — editor resolution and launch."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from kvault.editor import FALLBACK_EDITOR, editor_command, resolve_editor, run_editor
from kvault.errors import EditorLaunchError


class TestResolveEditor:
    def test_flag_wins(self):
        env = {"VISUAL": "code -w", "EDITOR": "vi"}
        assert resolve_editor("emacs", environ=env) == "emacs"

    def test_kv_editor_not_read_here(self):
        """KV_EDITOR comes in through Config.editor as the flag."""
        env = {"KV_EDITOR": "nano", "EDITOR": "vi"}
        assert resolve_editor(environ=env) == "vi"

    def test_visual_before_editor(self):
        assert resolve_editor(environ={"VISUAL": "code -w", "EDITOR": "vi"}) == "code -w"

    def test_editor(self):
        assert resolve_editor(environ={"EDITOR": "vi"}) == "vi"

    def test_blank_values_skipped(self):
        assert resolve_editor(environ={"VISUAL": "  ", "EDITOR": "vi"}) == "vi"

    def test_fallback(self):
        assert resolve_editor(environ={}) == FALLBACK_EDITOR == "vim"

    def test_reads_process_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("EDITOR", "ed")
        assert resolve_editor() == "ed"


class TestEditorCommand:
    def test_plain(self):
        assert editor_command("vim", "/tmp/x.tmp") == ["vim", "/tmp/x.tmp"]

    def test_with_flags(self):
        assert editor_command("code --wait", "/tmp/x.tmp") == ["code", "--wait", "/tmp/x.tmp"]

    def test_quoted_path(self):
        cmd = editor_command('"/opt/My Editor/bin/edit" -n', "/tmp/x.tmp")
        assert cmd == ["/opt/My Editor/bin/edit", "-n", "/tmp/x.tmp"]

    def test_empty(self):
        with pytest.raises(EditorLaunchError, match="empty"):
            editor_command("   ", "/tmp/x.tmp")

    def test_unbalanced_quote(self):
        with pytest.raises(EditorLaunchError, match="cannot parse"):
            editor_command('vim "oops', "/tmp/x.tmp")


class TestRunEditor:
    def test_success(self):
        with patch("kvault.editor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            run_editor("nano -w", "/tmp/x.tmp")
        mock_run.assert_called_once_with(["nano", "-w", "/tmp/x.tmp"])

    def test_nonzero_exit(self):
        with patch("kvault.editor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=2)
            with pytest.raises(EditorLaunchError, match="exited with status 2"):
                run_editor("vim", "/tmp/x.tmp")

    def test_missing_program(self):
        with patch("kvault.editor.subprocess.run", side_effect=FileNotFoundError("no such file")):
            with pytest.raises(EditorLaunchError, match="cannot start editor"):
                run_editor("no-such-editor", "/tmp/x.tmp")

    def test_real_process(self, tmp_path):
        """`true` exits 0 without touching the file."""
        target = tmp_path / "f.tmp"
        target.write_text("keep")
        run_editor("true", target)
        assert target.read_text() == "keep"

    def test_real_failing_process(self, tmp_path):
        with pytest.raises(EditorLaunchError):
            run_editor("false", tmp_path / "f.tmp")

    def test_run_uses_terminal(self):
        """The editor inherits stdin/stdout/stderr: no capture, no pipes."""
        with patch("kvault.editor.subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess(["vim"], 0)
            run_editor("vim", "/tmp/x.tmp")
        _, kwargs = mock_run.call_args
        assert "stdout" not in kwargs
        assert "capture_output" not in kwargs
