"""External editor resolution and invocation."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Mapping
from pathlib import Path

from kvault.errors import EditorLaunchError

logger = logging.getLogger(__name__)

FALLBACK_EDITOR = "vim"
EDITOR_ENV_VARS = ("VISUAL", "EDITOR")


def resolve_editor(flag: str | None = None, environ: Mapping[str, str] | None = None) -> str:
    """Pick the editor: explicit flag, then $VISUAL, $EDITOR, then vim.

    ``KV_EDITOR`` is read by the config layer and arrives here as ``flag``.
    """
    if flag:
        return flag
    env = os.environ if environ is None else environ
    for name in EDITOR_ENV_VARS:
        value = env.get(name, "").strip()
        if value:
            return value
    return FALLBACK_EDITOR


def editor_command(editor: str, path: Path | str) -> list[str]:
    """Build argv for ``editor`` on ``path``. Editor strings may carry flags."""
    try:
        argv = shlex.split(editor)
    except ValueError as e:
        raise EditorLaunchError(f"cannot parse editor command {editor!r}: {e}") from e
    if not argv:
        raise EditorLaunchError("editor command is empty")
    return [*argv, str(path)]


def run_editor(editor: str, path: Path | str) -> None:
    """Run the editor on ``path`` attached to this terminal; block until it exits."""
    cmd = editor_command(editor, path)
    logger.debug("Launching editor: %s", cmd[0])
    try:
        proc = subprocess.run(cmd)
    except OSError as e:
        raise EditorLaunchError(f"cannot start editor {cmd[0]!r}: {e}") from e
    if proc.returncode != 0:
        raise EditorLaunchError(f"editor {cmd[0]!r} exited with status {proc.returncode}")
