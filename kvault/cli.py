"""
kv CLI — browse and edit Azure Key Vault secret versions.

Usage:
    kv show <vault> <secret>            # Page through every version
    kv edit <vault> <secret> [-e EDITOR] # Edit the latest version
    kv version                          # Show version
"""

from __future__ import annotations

import argparse
import logging
import sys

from kvault.errors import KvError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="kv",
        description="kv — browse and edit Azure Key Vault secret versions.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    # show
    show_parser = subparsers.add_parser("show", help="Browse all versions of a secret")
    show_parser.add_argument("vault", help="Key Vault name")
    show_parser.add_argument("secret", help="Secret name")

    # edit
    edit_parser = subparsers.add_parser("edit", help="Edit the latest version of a secret")
    edit_parser.add_argument("vault", help="Key Vault name")
    edit_parser.add_argument("secret", help="Secret name")
    edit_parser.add_argument(
        "--editor", "-e", type=str, help="Editor command (default: $KV_EDITOR, $VISUAL, $EDITOR, vim)"
    )

    # version
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from kvault import __version__

        print(f"kv {__version__}")
        return 0

    from kvault.config import configure_logging, get_config

    configure_logging(get_config(), verbose=args.verbose)

    try:
        if args.command == "show":
            return _cmd_show(args)
        elif args.command == "edit":
            return _cmd_edit(args)
        else:
            parser.print_help()
            return 0
    except KvError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.debug("Command %s interrupted", args.command)
        print("Interrupted.", file=sys.stderr)
        return 130


def _client(vault: str):
    from kvault.config import get_config
    from kvault.keyvault import KeyVaultClient

    return KeyVaultClient(get_config().vault_url(vault))


def _cmd_show(args: argparse.Namespace) -> int:
    from kvault.workflow import browse_workflow

    versions = _client(args.vault).list_versions(args.secret)
    if not versions:
        print("No versions found for this secret.")
        return 0

    browse_workflow(versions, args.secret)
    return 0


def _warn_residual(handle, err: Exception) -> None:
    print(f"Warning: failed to securely delete temp file: {err}", file=sys.stderr)


def _cmd_edit(args: argparse.Namespace) -> int:
    from kvault.config import get_config
    from kvault.editor import resolve_editor
    from kvault.workflow import edit_secret

    cfg = get_config()
    editor = resolve_editor(args.editor or cfg.editor)
    outcome = edit_secret(
        _client(args.vault),
        args.secret,
        editor,
        scratch_dir=cfg.scratch_dir,
        on_release_error=_warn_residual,
        echo=print,
    )

    if not outcome.changed:
        print("No changes detected. Secret not updated.")
    elif not outcome.committed:
        print("Changes discarded.")
    else:
        print(f"✓ Secret '{args.secret}' updated successfully")
    return 0
