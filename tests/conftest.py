"""Pytest configuration and shared fixtures for better-debug tests."""

from __future__ import annotations

import pytest

from better_debug.config.settings import (
    ENV_REDACTION_MARKER,
    ENV_STRICT_SECRETS,
    ENV_VALUE_STYLE,
    RenderSettings,
    SettingsManager,
)
from better_debug.registry.formatter_registry import FormatterRegistry
from better_debug.registry.record_registry import RecordRegistry


def _reset_singletons() -> None:
    SettingsManager.reset()
    RecordRegistry._instance = None
    FormatterRegistry._instance = None


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Isolate every test from user config, env overrides and registry state."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for var in (ENV_REDACTION_MARKER, ENV_VALUE_STYLE, ENV_STRICT_SECRETS):
        monkeypatch.delenv(var, raising=False)
    _reset_singletons()
    yield
    _reset_singletons()


@pytest.fixture
def settings() -> RenderSettings:
    """Default render settings."""
    return RenderSettings()


@pytest.fixture
def schema_file(tmp_path):
    """Write a valid YAML schema and return its path."""
    path = tmp_path / "records.yaml"
    path.write_text(
        """\
records:
  Credentials:
    fields:
      - username
      - name: password
        secret:
        rename_to: Pwd
      - name: session
        exclude: true
  Empty:
    fields: []
"""
    )
    return path
