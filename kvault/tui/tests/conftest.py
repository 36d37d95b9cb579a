"""Test fixtures for the kvault TUI."""

from __future__ import annotations

import pytest

from kvault.models import SecretVersion


@pytest.fixture
def long_value():
    """A 50-line secret value, one short line per row."""
    return "".join(f"line {n}\n" for n in range(1, 51))


@pytest.fixture
def long_version(long_value):
    return SecretVersion(id="ffffffff00000000", value=long_value, enabled=True)
