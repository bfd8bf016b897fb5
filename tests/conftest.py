"""Shared test configuration."""

from __future__ import annotations

import pytest

from devrng.resolve import ENV_VAR

pytest_plugins = ["pytester"]


@pytest.fixture
def no_seed_env(monkeypatch):
    """Make sure no override seed leaks in from the outer environment."""
    monkeypatch.delenv(ENV_VAR, raising=False)
