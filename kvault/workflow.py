"""
Edit and browse workflows.

edit_workflow — scratch file -> editor -> read back -> review -> decision.
edit_secret — the same against a Key Vault secret's latest version.
browse_workflow — run the read-only version browser.

The editor launcher and the review step are injectable so the workflow can
run without a terminal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from kvault import scratch
from kvault.editor import run_editor
from kvault.errors import RemoteError
from kvault.models import SecretVersion
from kvault.tui.browse import run_browse
from kvault.tui.review import Decision, run_review

if TYPE_CHECKING:
    from kvault.keyvault import KeyVaultClient

logger = logging.getLogger(__name__)

Launcher = Callable[[str, Path], None]
Reviewer = Callable[[str, str, str], Decision]
Echo = Callable[[str], None]
ReleaseErrorHandler = Callable[[scratch.ScratchHandle, Exception], None]


@dataclass(frozen=True)
class EditOutcome:
    """Result of one edit. ``committed`` means the operator confirmed the review."""

    value: str
    committed: bool
    changed: bool = True


def _silent(_message: str) -> None:
    pass


def edit_workflow(
    original: str,
    *,
    secret_name: str,
    editor: str,
    scratch_dir: Path | str | None = None,
    launch: Launcher | None = None,
    review: Reviewer | None = None,
    on_release_error: ReleaseErrorHandler | None = None,
    echo: Echo = _silent,
) -> EditOutcome:
    """Let the operator edit ``original`` and confirm the result.

    The scratch file is erased and removed before the review starts, and on
    every error path. A byte-identical result skips the review entirely.
    """
    launch = launch or run_editor
    review = review or run_review
    with scratch.scratch_buffer(
        original, directory=scratch_dir, on_release_error=on_release_error
    ) as handle:
        echo(f"Opening editor: {editor}\n")
        launch(editor, handle.path)
        edited = scratch.read(handle)

    if edited == original:
        logger.info("No changes to %s", secret_name)
        return EditOutcome(value=original, committed=False, changed=False)

    echo("Review changes...")
    decision = review(original, edited, secret_name)
    committed = decision == Decision.CONFIRMED
    logger.info("Review of %s finished: %s", secret_name, decision)
    return EditOutcome(value=edited, committed=committed)


def edit_secret(
    client: KeyVaultClient,
    secret_name: str,
    editor: str,
    *,
    scratch_dir: Path | str | None = None,
    launch: Launcher | None = None,
    review: Reviewer | None = None,
    on_release_error: ReleaseErrorHandler | None = None,
    echo: Echo = _silent,
) -> EditOutcome:
    """Edit the latest version of ``secret_name`` and store it if confirmed."""
    versions = client.list_versions(secret_name)
    if not versions:
        raise RemoteError(f"no versions found for secret: {secret_name}")

    latest = versions[0]
    echo(f"Editing secret '{secret_name}' (version: {latest.short_id})")
    outcome = edit_workflow(
        latest.value,
        secret_name=secret_name,
        editor=editor,
        scratch_dir=scratch_dir,
        launch=launch,
        review=review,
        on_release_error=on_release_error,
        echo=echo,
    )
    if outcome.committed:
        client.set_value(secret_name, outcome.value)
    return outcome


def browse_workflow(
    versions: Sequence[SecretVersion],
    secret_name: str,
    *,
    browse: Callable[[Sequence[SecretVersion], str], None] | None = None,
) -> None:
    """Show the versions until the operator quits."""
    browse = browse or run_browse
    logger.debug("Browsing %d version(s) of %s", len(versions), secret_name)
    browse(versions, secret_name)
