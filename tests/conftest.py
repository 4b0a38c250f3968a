"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os

import pytest

_ENV_PREFIXES = ("GH_", "ECOREGISTRY_")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide caller credentials and overrides from every test."""
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(key)
