"""
Root-level shared test fixtures.

Inherited by tests/ and kvault/tui/tests/.
"""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from kvault.config import reset_config
from kvault.keyvault import KeyVaultClient
from kvault.models import SecretVersion


@pytest.fixture
def clean_env(monkeypatch):
    """Remove env vars that change editor, vault or logging behaviour."""
    for key in [
        "KV_EDITOR",
        "KV_VAULT_URL_TEMPLATE",
        "KV_SCRATCH_DIR",
        "KV_LOG_LEVEL",
        "KV_LOG_FILE",
        "VISUAL",
        "EDITOR",
    ]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def scratch_dir(tmp_path):
    """An empty private directory for scratch files."""
    d = tmp_path / "scratch"
    d.mkdir(mode=0o700)
    return d


@pytest.fixture
def versions():
    """Three versions of a secret, newest first."""
    return [
        SecretVersion(
            id="c3c3c3c3d4d4d4d4",
            value="password=hunter3\nuser=admin\n",
            enabled=True,
            created_at=datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
            tags={"env": "prod"},
        ),
        SecretVersion(
            id="b2b2b2b2c3c3c3c3",
            value="password=hunter2\nuser=admin\n",
            enabled=True,
            created_at=datetime(2024, 2, 1, 12, 0, tzinfo=UTC),
        ),
        SecretVersion(
            id="a1a1a1a1b2b2b2b2",
            value="password=hunter1\n",
            enabled=False,
            created_at=datetime(2024, 1, 1, 12, 0, tzinfo=UTC),
        ),
    ]


@pytest.fixture
def mock_client(versions):
    """A mocked KeyVaultClient serving the ``versions`` fixture."""
    client = MagicMock(spec=KeyVaultClient)
    client.vault_url = "https://test-vault.vault.azure.net/"
    client.list_versions.return_value = versions
    client.set_value.return_value = None
    return client
