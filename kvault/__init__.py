"""
kvault — browse and safely edit Azure Key Vault secret versions from the terminal.

Commands:
    kv show <vault> <secret>    # browse historical versions
    kv edit <vault> <secret>    # edit the latest version, review, commit
"""

from __future__ import annotations

__version__ = "0.1.0"
