"""Pytest configuration for the llmagent test suite.

Every test runs with a clean relay environment: ``LLMAGENT_*`` variables and
the OpenRouter key alias are removed, ``.env`` discovery points at a missing
file, and the process-level config and timeout caches are reset.
"""

from __future__ import annotations

import os
from typing import Iterator

import pytest

import llmagent.base.timeouts as timeouts_mod
import llmagent.config as config_mod
import llmagent.config.env as env_mod
from llmagent.mock import MockProvider


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Isolate each test from the developer's shell and ``.env`` file."""

    for name in list(os.environ):
        if name.startswith("LLMAGENT_") or name == "OPENROUTER_API_KEY":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.setattr(env_mod, "_DOTENV_LOADED", False)
    monkeypatch.setattr(config_mod, "_CACHED", None)
    monkeypatch.setattr(timeouts_mod, "_CACHED", None)
    monkeypatch.setattr(timeouts_mod, "_ENV_GUARD", None)
    yield


@pytest.fixture()
def mock_provider() -> MockProvider:
    """Yield a ``MockProvider`` replaying the canned three-part response."""

    return MockProvider()

