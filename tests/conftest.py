from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch, tmp_path):
    """Keep developer env vars and config files out of settings under test."""
    for key in list(os.environ):
        if key.startswith("TETU_STATUS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TETU_STATUS_CONFIG", str(tmp_path / "absent.toml"))
    monkeypatch.chdir(tmp_path)
