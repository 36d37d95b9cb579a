"""
Centralized configuration for kvault.

All configuration is loaded from environment variables with sensible defaults.

Usage:
    from kvault.config import get_config
    cfg = get_config()
    print(cfg.vault_url("my-vault"))   # "https://my-vault.vault.azure.net/"
    print(cfg.scratch_dir)             # "/tmp" or $KV_SCRATCH_DIR
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_VAULT_URL_TEMPLATE = "https://{vault}.vault.azure.net/"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class Config:
    """Top-level kvault configuration."""

    editor: str | None = None  # None = fall back to $VISUAL / $EDITOR / vim
    vault_url_template: str = DEFAULT_VAULT_URL_TEMPLATE
    scratch_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))

    # Logging
    log_level: str = "WARNING"
    log_file: Path | None = None  # None = stderr

    def vault_url(self, vault_name: str) -> str:
        return self.vault_url_template.format(vault=vault_name)


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> Config:
    """Load configuration from environment variables."""
    log_file = os.environ.get("KV_LOG_FILE", "")
    return Config(
        editor=os.environ.get("KV_EDITOR", "").strip() or None,
        vault_url_template=os.environ.get("KV_VAULT_URL_TEMPLATE", DEFAULT_VAULT_URL_TEMPLATE),
        scratch_dir=Path(os.environ.get("KV_SCRATCH_DIR", tempfile.gettempdir())),
        log_level=os.environ.get("KV_LOG_LEVEL", "WARNING").upper(),
        log_file=Path(log_file) if log_file else None,
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None


def configure_logging(cfg: Config, *, verbose: bool = False) -> None:
    """Configure root logging. A log file keeps records off a running TUI."""
    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    kwargs: dict = {"level": level, "format": LOG_FORMAT, "datefmt": LOG_DATEFMT}
    if cfg.log_file is not None:
        kwargs["filename"] = str(cfg.log_file)
    logging.basicConfig(**kwargs)
