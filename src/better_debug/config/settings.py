"""
Render settings for better-debug.

Settings are read once per process and captured into every render plan at
build time, so a cached plan renders the same way for its whole lifetime.

Config file (optional):
    ~/.config/better-debug/config.yaml

    defaults:
      redaction_marker: "<SECRET>"
      value_style: repr
      strict_secrets: false

Environment Variables (override the config file):
    BETTER_DEBUG_REDACTION_MARKER: Placeholder emitted for secret fields
    BETTER_DEBUG_VALUE_STYLE: "repr" (default) or "str"
    BETTER_DEBUG_STRICT_SECRETS: Reject secret fields that also declare a
        custom formatter instead of letting secrecy win
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_REDACTION_MARKER = "<SECRET>"

# Environment variable names
ENV_REDACTION_MARKER = "BETTER_DEBUG_REDACTION_MARKER"
ENV_VALUE_STYLE = "BETTER_DEBUG_VALUE_STYLE"
ENV_STRICT_SECRETS = "BETTER_DEBUG_STRICT_SECRETS"

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


class ValueStyle(str, Enum):
    """How a field's underlying value is turned into text."""

    REPR = "repr"  # Python's standard representation
    STR = "str"  # Human-facing str() form

    def apply(self, value: Any) -> str:
        if self is ValueStyle.STR:
            return str(value)
        return repr(value)


class RenderSettings(BaseModel):
    """Process-wide rendering options."""

    model_config = ConfigDict(frozen=True)

    redaction_marker: str = Field(
        default=DEFAULT_REDACTION_MARKER,
        min_length=1,
        description="Fixed placeholder emitted in place of secret values",
    )
    value_style: ValueStyle = Field(
        default=ValueStyle.REPR,
        description="Default formatting applied to field values",
    )
    strict_secrets: bool = Field(
        default=False,
        description="Reject secret + cust_formatter instead of letting secrecy win",
    )


def get_config_file() -> Path:
    """Get the config file path. Computed at runtime for test compatibility."""
    return Path.home() / ".config" / "better-debug" / "config.yaml"


def _load_config_defaults(config_file: Path) -> dict[str, Any]:
    if not config_file.exists():
        return {}

    try:
        config = yaml.safe_load(config_file.read_text()) or {}
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", config_file, e)
        return {}

    defaults = config.get("defaults", {}) if isinstance(config, dict) else {}
    if not isinstance(defaults, dict):
        logger.warning("Ignoring non-mapping 'defaults' in %s", config_file)
        return {}
    return defaults


class SettingsManager:
    """Loads and caches the process render settings."""

    _instance: ClassVar[SettingsManager | None] = None

    def __init__(self, config_file: Path | None = None) -> None:
        self._config_file = config_file or get_config_file()
        self._settings = self._load()

    @classmethod
    def get_instance(cls) -> SettingsManager:
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        cls._instance = None

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    def _load(self) -> RenderSettings:
        values = _load_config_defaults(self._config_file)

        marker = os.environ.get(ENV_REDACTION_MARKER)
        if marker:
            values["redaction_marker"] = marker

        style = os.environ.get(ENV_VALUE_STYLE)
        if style:
            values["value_style"] = style.strip().lower()

        strict = os.environ.get(ENV_STRICT_SECRETS)
        if strict is not None:
            values["strict_secrets"] = strict.strip().lower() in _TRUE_STRINGS

        known = {k: v for k, v in values.items() if k in RenderSettings.model_fields}
        try:
            return RenderSettings(**known)
        except ValidationError as e:
            logger.warning("Invalid better-debug settings, using defaults: %s", e)
            return RenderSettings()


def get_settings() -> RenderSettings:
    """Get the process render settings.

    Convenience function that uses the singleton SettingsManager.
    """
    return SettingsManager.get_instance().settings
